"""
Audit Logger

DESIGN DECISION: Every load and query is logged.
This provides:
1. Traceability from a printed balance back to its ledger file
2. Debugging capability when a row or argument is rejected
3. Correlation IDs to trace the events of a single run

Events only go to the structured local log. Nothing is persisted.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from transaction_analyser.models.analysis import TransactionsAnalysis
from transaction_analyser.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog(json_output: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
_configure_structlog()


def configure_logging(level: int = logging.WARNING, json_output: bool = True) -> None:
    """
    Route log output to stderr at the given level.

    stdout is reserved for analysis results.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(message)s",
        force=True,
    )
    structlog.reset_defaults()
    _configure_structlog(json_output)


class AuditLogger:
    """
    Central audit logging service.

    Maps event severity onto the structured logger's level.
    """

    def __init__(self, logger_name: str = "transaction_analyser.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_load_started(self, source: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.load_started(source, correlation_id))

    def log_transactions_loaded(
        self,
        source: str,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful ledger load."""
        event = AuditEventBuilder.transactions_loaded(
            source=source,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_source_unavailable(
        self,
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a ledger that could not be opened or read."""
        event = AuditEventBuilder.source_unavailable(
            source=source,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_format_rejected(
        self,
        source: str,
        row_number: int,
        field: Optional[str],
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a row that aborted the load."""
        event = AuditEventBuilder.format_rejected(
            source=source,
            row_number=row_number,
            field=field,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_query_received(
        self,
        account_id: str,
        date_from: str,
        date_to: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.query_received(
            account_id=account_id,
            date_from=date_from,
            date_to=date_to,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_argument_rejected(
        self,
        argument: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.argument_rejected(
            argument=argument,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_analysis_completed(
        self,
        account_id: str,
        date_range: str,
        analysis: TransactionsAnalysis,
        correlation_id: UUID,
    ) -> None:
        """Log a completed balance query."""
        event = AuditEventBuilder.analysis_completed(
            account_id=account_id,
            date_range=date_range,
            analysis=analysis,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a run and pass it through every step.
    """
    return uuid4()
