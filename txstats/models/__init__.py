"""
Data Models Package

This package contains all Pydantic models used by Transaction Statistics.
All data flowing through the system must conform to these schemas.
"""

from txstats.models.transaction import (
    AccountLocation,
    AdmissionResult,
    Authorization,
    LocationResult,
    Outcome,
    ResetResult,
    SnapshotResult,
    Statistics,
    Transaction,
)
from txstats.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "AccountLocation",
    "AdmissionResult",
    "Authorization",
    "LocationResult",
    "Outcome",
    "ResetResult",
    "SnapshotResult",
    "Statistics",
    "Transaction",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
