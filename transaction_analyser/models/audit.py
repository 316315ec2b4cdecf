"""
Audit Models for Transaction Analyser

Every load and every query produces audit events.
This provides:
1. Traceability of which ledger a balance was computed from
2. Debugging information when a load or query fails
3. A record of rejected input without persisting any results

DESIGN DECISION: Audit events are only logged, never stored.
Persisting results is out of scope for this tool.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from transaction_analyser.models.analysis import TransactionsAnalysis


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    TRANSACTIONS_LOAD_STARTED = "transactions_load_started"
    TRANSACTIONS_LOADED = "transactions_loaded"
    SOURCE_UNAVAILABLE = "source_unavailable"
    FORMAT_REJECTED = "format_rejected"

    # Query operations
    QUERY_RECEIVED = "query_received"
    ARGUMENT_REJECTED = "argument_rejected"
    ANALYSIS_COMPLETED = "analysis_completed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant step of a run creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about? (a ledger path or an account id)
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'source', 'account')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Identifier of the entity this event relates to"
    )

    # Correlation - ties the events of one run together
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    # Fixed wording only; user supplied values go in entity_id or details
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transactions_loaded(source, 42, correlation_id)
        event = AuditEventBuilder.analysis_completed(account_id, ..., correlation_id)
    """

    @staticmethod
    def load_started(source: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOAD_STARTED,
            severity=AuditSeverity.DEBUG,
            entity_type="source",
            entity_id=source,
            correlation_id=correlation_id,
            description="Loading transactions",
        )

    @staticmethod
    def transactions_loaded(
        source: str,
        transaction_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOADED,
            entity_type="source",
            entity_id=source,
            correlation_id=correlation_id,
            description=f"Loaded {transaction_count} transactions",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def source_unavailable(
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            entity_type="source",
            entity_id=source,
            correlation_id=correlation_id,
            description="Transaction source could not be read",
            error_code="SOURCE_ERROR",
            error_message=error_message,
        )

    @staticmethod
    def format_rejected(
        source: str,
        row_number: int,
        field: Optional[str],
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORMAT_REJECTED,
            severity=AuditSeverity.ERROR,
            entity_type="source",
            entity_id=source,
            correlation_id=correlation_id,
            description=f"Row {row_number} could not be decoded",
            details={
                "row_number": row_number,
                "field": field,
            },
            error_code="FORMAT_ERROR",
            error_message=error_message,
        )

    @staticmethod
    def query_received(
        account_id: str,
        date_from: str,
        date_to: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_RECEIVED,
            severity=AuditSeverity.DEBUG,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Relative balance requested",
            details={
                "date_from": date_from,
                "date_to": date_to,
            },
        )

    @staticmethod
    def argument_rejected(
        argument: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ARGUMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="argument",
            entity_id=argument,
            correlation_id=correlation_id,
            description="Query argument rejected",
            error_code="ARGUMENT_ERROR",
            error_message=error_message,
        )

    @staticmethod
    def analysis_completed(
        account_id: str,
        date_range: str,
        analysis: TransactionsAnalysis,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANALYSIS_COMPLETED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Relative balance computed for {date_range}",
            details=analysis.to_log_dict(),
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_code=error_type,
            error_message=error_message,
        )
