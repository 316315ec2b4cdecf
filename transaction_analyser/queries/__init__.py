"""Balance query package."""

from transaction_analyser.models.analysis import ArgumentError
from transaction_analyser.queries.analyser import TransactionsAnalyser

__all__ = ["ArgumentError", "TransactionsAnalyser"]
