"""
Wire schemas for the HTTP API.

Field names follow the public contract: the transaction body is
{amount, timestamp}, the location body is {city}, and statistics are
returned as {sum, avg, max, min, count}.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from txstats.models.transaction import Statistics


class TransactionPayload(BaseModel):
    """
    POST /transaction body.

    Both fields default to their zero value so that a structurally valid
    but incomplete body reaches the aggregator and is reported as
    malformed input, not as an undecodable body.
    """
    model_config = ConfigDict(extra="ignore")

    amount: float = 0.0
    timestamp: Optional[datetime] = Field(
        default=None,
        description="RFC 3339 instant"
    )


class LocationPayload(BaseModel):
    """POST /location body."""
    model_config = ConfigDict(extra="ignore")

    city: str = ""


class StatisticsPayload(BaseModel):
    """GET /statistics response body."""

    sum: float
    avg: float
    max: float
    min: float
    count: int

    @classmethod
    def from_statistics(cls, statistics: Statistics) -> "StatisticsPayload":
        return cls(
            sum=statistics.sum,
            avg=statistics.average,
            max=statistics.max,
            min=statistics.min,
            count=statistics.count,
        )

    def to_statistics(self) -> Statistics:
        return Statistics(
            sum=self.sum,
            average=self.avg,
            max=self.max,
            min=self.min,
            count=self.count,
        )


class HealthPayload(BaseModel):
    status: str
    service: str
    version: str
