"""
Temporal Validation

Every transaction timestamp goes through two steps before admission:

STEP 1 - NORMALIZATION:
- The wall-clock fields of the incoming timestamp (year through second)
  are taken literally and labeled as the reference timezone.
- Sub-second precision is dropped.
- Whatever UTC offset the input claimed is discarded.

This is a relabeling, not a conversion: "10:00:00+00:00" becomes
"10:00:00" in the reference zone, not "15:30:00".

STEP 2 - FRESHNESS:
- Older than the freshness window relative to now: rejected.
- Exactly at the window edge: accepted.
- Any amount in the future: rejected.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional

from pydantic import BaseModel

from txstats.models.transaction import Outcome


Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current wall-clock time, timezone-aware."""
    return datetime.now(timezone.utc)


ZERO_INSTANT = datetime.min.replace(tzinfo=timezone.utc)


def is_zero_timestamp(timestamp: Optional[datetime]) -> bool:
    """
    True when the timestamp is absent or names the zero-value instant
    (0001-01-01T00:00:00 UTC), whatever offset it is written in.
    Naive timestamps are read as UTC.
    """
    if timestamp is None:
        return True
    if timestamp.utcoffset() is None:
        return timestamp == datetime.min
    return timestamp == ZERO_INSTANT


class TimestampCheck(BaseModel):
    """
    Result of validating one timestamp.

    Exactly one of `normalized` / `rejection` is set.
    """

    normalized: Optional[datetime] = None
    rejection: Optional[Outcome] = None
    message: str = ""

    @property
    def is_valid(self) -> bool:
        return self.rejection is None


class TemporalValidator:
    """
    Normalizes timestamps into the reference zone and enforces freshness.
    """

    def __init__(
        self,
        reference_zone: tzinfo,
        freshness_window: timedelta = timedelta(seconds=60),
        clock: Clock = system_clock,
    ):
        """
        Args:
            reference_zone: Zone every timestamp is relabeled into
            freshness_window: Maximum accepted age of a transaction
            clock: Source of "now"; must return an aware datetime
        """
        self._zone = reference_zone
        self._window = freshness_window
        self._clock = clock

    @property
    def reference_zone(self) -> tzinfo:
        return self._zone

    @property
    def freshness_window(self) -> timedelta:
        return self._window

    def normalize(self, timestamp: datetime) -> datetime:
        """Relabel the wall-clock fields of `timestamp` into the reference zone."""
        return datetime(
            timestamp.year,
            timestamp.month,
            timestamp.day,
            timestamp.hour,
            timestamp.minute,
            timestamp.second,
            tzinfo=self._zone,
        )

    def validate(self, timestamp: Optional[datetime]) -> TimestampCheck:
        """
        Validate a raw timestamp.

        Returns:
            TimestampCheck with the normalized timestamp, or the
            rejection kind (MALFORMED_INPUT or STALE_OR_FUTURE)
        """
        if is_zero_timestamp(timestamp):
            return TimestampCheck(
                rejection=Outcome.MALFORMED_INPUT,
                message="Timestamp is missing",
            )

        normalized = self.normalize(timestamp)
        now = self._clock()

        if normalized > now:
            return TimestampCheck(
                rejection=Outcome.STALE_OR_FUTURE,
                message=f"Timestamp {normalized.isoformat()} is in the future",
            )

        age = now - normalized
        if age > self._window:
            return TimestampCheck(
                rejection=Outcome.STALE_OR_FUTURE,
                message=(
                    f"Timestamp {normalized.isoformat()} is older than "
                    f"{int(self._window.total_seconds())} seconds"
                ),
            )

        return TimestampCheck(normalized=normalized)
