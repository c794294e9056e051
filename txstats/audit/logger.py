"""
Audit Logger

DESIGN DECISION: Every core operation is logged.
This provides:
1. Complete traceability of admissions and rejections
2. Visibility into denied statistics reads
3. Debugging capability for client integrations

The audit logger:
- Gracefully handles failures (never fails the operation if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

import structlog

from txstats.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from txstats.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "info") -> None:
    """
    Route structlog output through the stdlib root logger at `level`.

    Call once at process startup.
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("txstats.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_admitted(
        self,
        amount: float,
        timestamp: datetime,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful admission."""
        self.log(AuditEventBuilder.transaction_admitted(
            amount=amount,
            timestamp=timestamp,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_transaction_rejected(
        self,
        reason: str,
        message: str,
        amount: Optional[float] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected admission."""
        self.log(AuditEventBuilder.transaction_rejected(
            reason=reason,
            message=message,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transactions_reset(
        self,
        discarded_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transactions_reset(
            discarded_count=discarded_count,
            correlation_id=correlation_id,
        ))

    def log_statistics_served(
        self,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.statistics_served(
            count=count,
            correlation_id=correlation_id,
        ))

    def log_statistics_denied(
        self,
        asserted_location: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a statistics read refused by the location gate."""
        self.log(AuditEventBuilder.statistics_denied(
            asserted_location=asserted_location,
            correlation_id=correlation_id,
        ))

    def log_statistics_empty(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.statistics_empty(
            correlation_id=correlation_id,
        ))

    def log_location_set(
        self,
        location: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.location_set(
            location=location,
            correlation_id=correlation_id,
        ))

    def log_location_rejected(
        self,
        candidate: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.location_rejected(
            candidate=candidate,
            correlation_id=correlation_id,
        ))

    def log_location_cleared(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.location_cleared(
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new request.
    Pass it through all subsequent operations.
    """
    return uuid4()
