"""
Shared fixtures.

All tests run against a fixed clock in the reference zone, so
freshness boundaries are exact and no test depends on wall time.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from txstats.api import create_app
from txstats.audit import AuditLogger
from txstats.core import Aggregator, TemporalValidator
from txstats.storage import InMemoryAuditStorage


IST = ZoneInfo("Asia/Kolkata")
NOW = datetime(2024, 12, 15, 10, 30, 0, tzinfo=IST)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def validator(clock: FixedClock) -> TemporalValidator:
    return TemporalValidator(
        reference_zone=IST,
        freshness_window=timedelta(seconds=60),
        clock=clock,
    )


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage(capacity=1000)


@pytest.fixture
def aggregator(validator: TemporalValidator, audit_storage: InMemoryAuditStorage) -> Aggregator:
    return Aggregator(validator, audit_logger=AuditLogger(audit_storage))


@pytest.fixture
def api(aggregator: Aggregator) -> TestClient:
    return TestClient(create_app(aggregator=aggregator))
