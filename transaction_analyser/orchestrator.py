"""
Main Orchestrator for Transaction Analyser

Ties the components together into one end-to-end flow:
arguments → validated query → loaded ledger → analysis

DESIGN DECISION: The orchestrator enforces the ordering:
- Arguments are validated before the ledger is touched
- No analysis runs on a partially loaded ledger
- Every step is audited, every failure is audited and re-raised
- Failures outside the loader and argument taxonomy are audited
  as system errors
"""

from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from transaction_analyser.audit import AuditLogger, create_correlation_id
from transaction_analyser.config import AnalyserSettings, get_settings
from transaction_analyser.loader import FormatError, SourceError, TransactionLoader
from transaction_analyser.models.analysis import (
    AnalysisQuery,
    ArgumentError,
    TransactionsAnalysis,
    describe_range,
)
from transaction_analyser.models.transaction import Transaction
from transaction_analyser.queries import TransactionsAnalyser


class AnalysisFlow:
    """
    Orchestrates a single balance query.

    Flow:
    1. Parse → build an AnalysisQuery from raw strings
    2. Load → read the whole ledger, fail fast on any bad row
    3. Analyse → compute the balance and contributing payments
    """

    def __init__(
        self,
        loader: Optional[TransactionLoader] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AnalyserSettings] = None,
    ):
        self._settings = settings or get_settings()
        self._loader = loader or TransactionLoader(encoding=self._settings.csv_encoding)
        self._audit_logger = audit_logger or AuditLogger()

    def parse_query(
        self,
        account_id: str,
        date_from: str,
        date_to: str,
        correlation_id: UUID,
    ) -> AnalysisQuery:
        """
        Validate raw arguments.

        Raises:
            ArgumentError: If any argument is malformed
        """
        self._audit_logger.log_query_received(
            account_id=account_id,
            date_from=date_from,
            date_to=date_to,
            correlation_id=correlation_id,
        )
        try:
            return AnalysisQuery.from_arguments(account_id, date_from, date_to)
        except ArgumentError as e:
            self._audit_logger.log_argument_rejected(
                argument=e.argument,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

    def load_transactions(
        self,
        source: Union[str, Path],
        correlation_id: UUID,
    ) -> tuple[Transaction, ...]:
        """
        Load the ledger.

        Raises:
            SourceError: If the ledger cannot be read
            FormatError: If any row cannot be decoded
        """
        source_name = str(source)
        self._audit_logger.log_load_started(source_name, correlation_id)
        try:
            transactions = self._loader.load(source)
        except SourceError as e:
            self._audit_logger.log_source_unavailable(
                source=source_name,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise
        except FormatError as e:
            self._audit_logger.log_format_rejected(
                source=source_name,
                row_number=e.row_number,
                field=e.field,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_transactions_loaded(
            source=source_name,
            transaction_count=len(transactions),
            correlation_id=correlation_id,
        )
        return transactions

    def run(
        self,
        account_id: str,
        date_from: str,
        date_to: str,
        source: Optional[Union[str, Path]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionsAnalysis:
        """
        Run the full flow for one query.

        `source` defaults to the configured CSV path.
        """
        correlation_id = correlation_id or create_correlation_id()

        query = self.parse_query(account_id, date_from, date_to, correlation_id)
        transactions = self.load_transactions(
            source if source is not None else self._settings.csv_path,
            correlation_id,
        )

        date_range = describe_range(query.date_from, query.date_to)
        try:
            analysis = TransactionsAnalyser(transactions).analyse_query(query)
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"date_range": date_range},
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_analysis_completed(
            account_id=query.account_id,
            date_range=date_range,
            analysis=analysis,
            correlation_id=correlation_id,
        )
        return analysis


def create_app_components(
    settings: Optional[AnalyserSettings] = None,
) -> tuple[AnalysisFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Loaded from the environment if None.

    Returns:
        (analysis_flow, audit_logger)
    """
    settings = settings or get_settings()

    audit_logger = AuditLogger()
    analysis_flow = AnalysisFlow(
        loader=TransactionLoader(encoding=settings.csv_encoding),
        audit_logger=audit_logger,
        settings=settings,
    )

    return analysis_flow, audit_logger
