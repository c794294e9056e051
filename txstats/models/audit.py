"""
Audit Models for Transaction Statistics

Every operation on the account is logged for audit purposes.
This provides:
1. Traceability of admissions and rejections
2. A record of who was denied access to statistics
3. Debugging information when clients see unexpected outcomes

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
Resetting the account clears transaction data, never the audit trail.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every core operation outcome has its own event type.
    """
    # Admission
    TRANSACTION_ADMITTED = "transaction_admitted"
    TRANSACTION_REJECTED = "transaction_rejected"
    TRANSACTIONS_RESET = "transactions_reset"

    # Statistics reads
    STATISTICS_SERVED = "statistics_served"
    STATISTICS_DENIED = "statistics_denied"
    STATISTICS_EMPTY = "statistics_empty"

    # Location
    LOCATION_SET = "location_set"
    LOCATION_REJECTED = "location_rejected"
    LOCATION_CLEARED = "location_cleared"

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

    This is the core unit of our audit trail.
    Every core operation creates one of these.
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'statistics', 'location')"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one HTTP request)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

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
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_admitted(amount, timestamp)
        event = AuditEventBuilder.statistics_denied(asserted_location)
    """

    @staticmethod
    def transaction_admitted(
        amount: float,
        timestamp: datetime,
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADMITTED,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction admitted: {amount}",
            details={
                "amount": amount,
                "timestamp": timestamp.isoformat(),
                "count": count,
            },
        )

    @staticmethod
    def transaction_rejected(
        reason: str,
        message: str,
        amount: Optional[float] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction rejected: {reason}",
            error_message=message,
            details={
                "reason": reason,
                "amount": amount,
            },
        )

    @staticmethod
    def transactions_reset(
        discarded_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_RESET,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"All transactions deleted ({discarded_count} discarded)",
            details={
                "discarded_count": discarded_count,
            },
        )

    @staticmethod
    def statistics_served(
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATISTICS_SERVED,
            entity_type="statistics",
            correlation_id=correlation_id,
            description=f"Statistics served over {count} transactions",
            details={
                "count": count,
            },
        )

    @staticmethod
    def statistics_denied(
        asserted_location: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATISTICS_DENIED,
            severity=AuditSeverity.WARNING,
            entity_type="statistics",
            correlation_id=correlation_id,
            description="Statistics denied: location mismatch",
            details={
                "asserted_location": asserted_location,
            },
        )

    @staticmethod
    def statistics_empty(
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATISTICS_EMPTY,
            entity_type="statistics",
            correlation_id=correlation_id,
            description="Statistics requested but no transactions recorded",
        )

    @staticmethod
    def location_set(
        location: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOCATION_SET,
            entity_type="location",
            correlation_id=correlation_id,
            description=f"Location updated: {location}",
            details={
                "location": location,
            },
        )

    @staticmethod
    def location_rejected(
        candidate: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOCATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="location",
            correlation_id=correlation_id,
            description="Location rejected: empty after trimming",
            details={
                "candidate": candidate,
            },
        )

    @staticmethod
    def location_cleared(
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOCATION_CLEARED,
            entity_type="location",
            correlation_id=correlation_id,
            description="Location reset",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
