"""
Core Data Models for Transaction Statistics

These models define the schemas for everything flowing through the
aggregation engine. They are designed to:
1. Make every outcome an explicit, distinguishable value
2. Keep admitted transactions immutable
3. Be serializable for the transport layer and the audit trail

DESIGN DECISION: Core operations never raise for expected conditions.
Each one returns a result model whose `outcome` names exactly what happened,
and the transport layer maps that outcome to a response.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of outcomes
# =============================================================================

class Outcome(str, Enum):
    """
    Every outcome a core operation can produce.

    Success and failure kinds share one enum so they stay distinguishable
    end to end, from the aggregator through HTTP and back into the client.
    """
    # Admit
    CREATED = "created"
    MALFORMED_INPUT = "malformed_input"
    STALE_OR_FUTURE = "stale_or_future"

    # Snapshot
    STATISTICS = "statistics"
    DENIED = "denied"
    EMPTY = "empty"

    # Reset
    CLEARED = "cleared"

    # Location
    LOCATION_SET = "location_set"
    INVALID_LOCATION = "invalid_location"
    LOCATION_CLEARED = "location_cleared"


class Authorization(str, Enum):
    """Decision of the location gate."""
    ALLOWED = "allowed"
    DENIED = "denied"


# =============================================================================
# DOMAIN MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    An admitted transaction.

    CRITICAL: Only transactions that passed validation are ever built.
    The timestamp is already normalized into the reference timezone.
    """
    model_config = ConfigDict(frozen=True)

    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Transaction amount (finite, never zero)"
    )
    timestamp: datetime = Field(
        ...,
        description="Normalized timestamp in the reference timezone"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: float) -> float:
        """Zero is the 'unset' sentinel and never a real amount."""
        if v == 0:
            raise ValueError("Amount must be non-zero")
        return v

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        """Admitted timestamps always carry their zone."""
        if v.tzinfo is None:
            raise ValueError("Timestamp must be timezone-aware")
        return v


class Statistics(BaseModel):
    """
    Descriptive statistics over every admission since the last reset.

    Only built when at least one transaction has been admitted.
    """
    model_config = ConfigDict(frozen=True)

    sum: float
    average: float
    max: float
    min: float
    count: int = Field(
        ...,
        ge=1,
        description="Number of admissions since the last reset"
    )


class AccountLocation(BaseModel):
    """
    The account's declared location.

    An empty value means unset: the account has not opted into
    location-based protection.
    """
    model_config = ConfigDict(frozen=True)

    value: str = ""

    @property
    def is_set(self) -> bool:
        return self.value != ""


# =============================================================================
# RESULT MODELS
# =============================================================================

class AdmissionResult(BaseModel):
    """Result of admitting a transaction."""

    outcome: Outcome
    message: str
    transaction: Optional[Transaction] = None

    @property
    def created(self) -> bool:
        return self.outcome == Outcome.CREATED


class SnapshotResult(BaseModel):
    """
    Result of a statistics read.

    `statistics` is present only when the outcome is STATISTICS.
    """

    outcome: Outcome
    message: str
    statistics: Optional[Statistics] = None


class ResetResult(BaseModel):
    """Result of clearing all transaction data."""

    outcome: Outcome = Outcome.CLEARED
    message: str = "transactions deleted"
    discarded_count: int = Field(
        default=0,
        ge=0,
        description="How many ledger entries were discarded"
    )


class LocationResult(BaseModel):
    """Result of setting or clearing the account location."""

    outcome: Outcome
    message: str
    location: Optional[str] = Field(
        default=None,
        description="Stored location after the operation (None when unset)"
    )
