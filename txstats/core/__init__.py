"""
Aggregation engine.

Leaves first: temporal validation, ledger, running aggregate,
location gate; the Aggregator composes them.
"""

from txstats.core.aggregate import RunningAggregate
from txstats.core.aggregator import Aggregator
from txstats.core.ledger import Ledger
from txstats.core.location import InvalidLocationError, LocationGate
from txstats.core.temporal import (
    TemporalValidator,
    TimestampCheck,
    is_zero_timestamp,
    system_clock,
)

__all__ = [
    "Aggregator",
    "InvalidLocationError",
    "Ledger",
    "LocationGate",
    "RunningAggregate",
    "TemporalValidator",
    "TimestampCheck",
    "is_zero_timestamp",
    "system_clock",
]
