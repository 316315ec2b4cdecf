"""
Data Models Package

This package contains all Pydantic models used by the Transaction Analyser.
Ledger records, queries and results must conform to these schemas.
"""

from transaction_analyser.models.transaction import (
    DATE_TIME_FORMAT,
    Transaction,
    TransactionType,
    format_timestamp,
    parse_timestamp,
)
from transaction_analyser.models.analysis import (
    AnalysisQuery,
    ArgumentError,
    TransactionGroups,
    TransactionsAnalysis,
)
from transaction_analyser.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "DATE_TIME_FORMAT",
    "Transaction",
    "TransactionType",
    "format_timestamp",
    "parse_timestamp",
    # Analysis models
    "AnalysisQuery",
    "ArgumentError",
    "TransactionGroups",
    "TransactionsAnalysis",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
