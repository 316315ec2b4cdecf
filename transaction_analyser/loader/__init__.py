"""
Loader Package

Turns a delimited ledger file into Transaction records.
"""

from transaction_analyser.loader.csv_loader import (
    FormatError,
    LoaderError,
    SourceError,
    TransactionLoader,
    decode_row,
)

__all__ = [
    "FormatError",
    "LoaderError",
    "SourceError",
    "TransactionLoader",
    "decode_row",
]
