"""
Tests for the Aggregator

These cover the end-to-end rules for one account:
admission, statistics reads, resets and the location gate.
"""

import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from txstats.config import AggregatorSettings
from txstats.core import Aggregator, Ledger
from txstats.models.audit import AuditEventType
from txstats.models.transaction import Outcome

from conftest import IST, NOW


class TestAdmission:
    """Tests for Aggregator.admit."""

    def test_fresh_transaction_created(self, aggregator):
        """Test that a fresh non-zero transaction is admitted."""
        result = aggregator.admit(120.5, NOW)

        assert result.outcome == Outcome.CREATED
        assert result.message == "transaction inserted"
        assert result.transaction.amount == 120.5
        assert len(aggregator.ledger) == 1

    def test_zero_amount_is_malformed(self, aggregator):
        """Test that zero amounts never reach the ledger."""
        result = aggregator.admit(0, NOW)

        assert result.outcome == Outcome.MALFORMED_INPUT
        assert aggregator.ledger == ()

    def test_missing_timestamp_is_malformed(self, aggregator):
        """Test that an absent timestamp is malformed input."""
        result = aggregator.admit(10.0, None)
        assert result.outcome == Outcome.MALFORMED_INPUT

    def test_zero_instant_is_malformed(self, aggregator):
        """Test that 0001-01-01T00:00:00Z is malformed, not stale."""
        result = aggregator.admit(10.0, datetime(1, 1, 1, tzinfo=timezone.utc))
        assert result.outcome == Outcome.MALFORMED_INPUT

    def test_zero_instant_with_offset_is_malformed(self, aggregator):
        """Test that 0001-01-01T05:30:00+05:30 is the zero instant too."""
        ts = datetime(1, 1, 1, 5, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert aggregator.admit(10.0, ts).outcome == Outcome.MALFORMED_INPUT

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount_is_malformed(self, aggregator, amount):
        """Test that NaN and infinities never reach the aggregate."""
        result = aggregator.admit(amount, NOW)

        assert result.outcome == Outcome.MALFORMED_INPUT
        assert aggregator.ledger == ()
        assert aggregator.snapshot(None).outcome == Outcome.EMPTY

    def test_non_finite_amount_leaves_statistics_readable(self, aggregator):
        """Test that statistics stay finite after a non-finite attempt."""
        aggregator.admit(5.0, NOW)
        aggregator.admit(float("inf"), NOW)

        stats = aggregator.snapshot(None).statistics
        assert (stats.sum, stats.max, stats.count) == (5.0, 5.0, 1)

    def test_malformed_wins_over_stale(self, aggregator):
        """Test that a zero amount with a stale timestamp is still malformed."""
        result = aggregator.admit(0, NOW - timedelta(hours=1))
        assert result.outcome == Outcome.MALFORMED_INPUT

    def test_stale_transaction(self, aggregator):
        """Test that a transaction older than the window is rejected."""
        result = aggregator.admit(10.0, NOW - timedelta(seconds=61))

        assert result.outcome == Outcome.STALE_OR_FUTURE
        assert result.transaction is None

    def test_future_transaction(self, aggregator):
        """Test that a future transaction is rejected."""
        result = aggregator.admit(10.0, NOW + timedelta(minutes=5))
        assert result.outcome == Outcome.STALE_OR_FUTURE

    def test_window_edge_is_admitted(self, aggregator):
        """Test that exactly 60 seconds old is admitted."""
        result = aggregator.admit(10.0, NOW - timedelta(seconds=60))
        assert result.outcome == Outcome.CREATED

    def test_negative_amount_admitted(self, aggregator):
        """Test that refunds are admitted."""
        assert aggregator.admit(-25.0, NOW).outcome == Outcome.CREATED

    def test_stored_timestamp_is_relabeled(self, aggregator):
        """Test that the ledger holds the reference-zone timestamp."""
        ts = datetime(2024, 12, 15, 10, 30, 0, 250000, tzinfo=timezone(timedelta(hours=-3)))
        # Same wall-clock fields as NOW, so fresh after relabeling.
        result = aggregator.admit(5.0, ts)

        assert result.outcome == Outcome.CREATED
        stored = aggregator.ledger[0].timestamp
        assert stored == NOW
        assert stored.utcoffset() == timedelta(hours=5, minutes=30)

    def test_rejection_leaves_state_untouched(self, aggregator):
        """Test that rejected admissions change nothing."""
        aggregator.admit(100.0, NOW)
        before = aggregator.snapshot(None).statistics

        aggregator.admit(0, NOW)
        aggregator.admit(5.0, None)
        aggregator.admit(5.0, NOW - timedelta(hours=2))
        aggregator.admit(5.0, NOW + timedelta(seconds=30))

        assert len(aggregator.ledger) == 1
        assert aggregator.snapshot(None).statistics == before


class TestSnapshot:
    """Tests for Aggregator.snapshot."""

    def test_empty(self, aggregator):
        """Test that an empty account reports EMPTY, not zeros."""
        result = aggregator.snapshot(None)

        assert result.outcome == Outcome.EMPTY
        assert result.statistics is None

    def test_statistics_scenario(self, aggregator):
        """Test statistics over three admitted amounts."""
        for amount in (200.5, 10.5, 10000):
            assert aggregator.admit(amount, NOW).outcome == Outcome.CREATED

        result = aggregator.snapshot(None)

        assert result.outcome == Outcome.STATISTICS
        stats = result.statistics
        assert stats.sum == 10211
        assert stats.average == pytest.approx(3403.667, abs=1e-3)
        assert stats.max == 10000
        assert stats.min == 10.5
        assert stats.count == 3

    def test_stale_transactions_not_counted(self, aggregator):
        """Test that only admitted amounts contribute."""
        aggregator.admit(10.0, NOW)
        aggregator.admit(1000.0, NOW - timedelta(minutes=10))

        stats = aggregator.snapshot(None).statistics
        assert stats.count == 1
        assert stats.max == 10.0

    def test_aging_does_not_expire(self, aggregator, clock):
        """Test that statistics cover every admission since reset, however old."""
        aggregator.admit(10.0, NOW)
        clock.advance(3600)

        assert aggregator.snapshot(None).statistics.count == 1

    def test_statistics_not_recomputed_from_ledger(self, aggregator, monkeypatch):
        """Test that neither admission nor reads walk the ledger."""
        def fail(*args, **kwargs):
            raise AssertionError("ledger was scanned")

        monkeypatch.setattr(Ledger, "all", fail)

        for amount in (1.0, 2.0, 3.0):
            aggregator.admit(amount, NOW)
        stats = aggregator.snapshot(None).statistics

        assert stats.sum == 6.0
        assert stats.count == 3


class TestReset:
    """Tests for Aggregator.reset."""

    def test_reset_clears_statistics(self, aggregator):
        """Test that reset empties the ledger and the aggregate."""
        aggregator.admit(10.0, NOW)
        aggregator.admit(20.0, NOW)

        result = aggregator.reset()

        assert result.outcome == Outcome.CLEARED
        assert result.discarded_count == 2
        assert aggregator.ledger == ()
        assert aggregator.snapshot(None).outcome == Outcome.EMPTY

    def test_reset_is_idempotent(self, aggregator):
        """Test that resetting an empty account is fine."""
        assert aggregator.reset().outcome == Outcome.CLEARED
        assert aggregator.reset().discarded_count == 0

    def test_reset_keeps_location(self, aggregator):
        """Test that reset does not touch the location gate."""
        aggregator.set_location("bangalore")
        aggregator.admit(10.0, NOW)
        aggregator.reset()

        assert aggregator.snapshot("kochi").outcome == Outcome.DENIED

    def test_admission_after_reset(self, aggregator):
        """Test that min/max start over after a reset."""
        aggregator.admit(1.0, NOW)
        aggregator.admit(999.0, NOW)
        aggregator.reset()
        aggregator.admit(50.0, NOW)

        stats = aggregator.snapshot(None).statistics
        assert (stats.min, stats.max, stats.count) == (50.0, 50.0, 1)


class TestLocation:
    """Tests for location gating through the aggregator."""

    def test_location_scenario(self, aggregator):
        """Test setting a location and reading from matching and other cities."""
        aggregator.admit(10.0, NOW)

        assert aggregator.set_location("bangalore").outcome == Outcome.LOCATION_SET
        assert aggregator.snapshot("bangalore").outcome == Outcome.STATISTICS
        assert aggregator.snapshot("kochi").outcome == Outcome.DENIED
        assert aggregator.snapshot(None).outcome == Outcome.DENIED
        assert aggregator.snapshot("").outcome == Outcome.DENIED

        assert aggregator.clear_location().outcome == Outcome.LOCATION_CLEARED
        assert aggregator.snapshot("kochi").outcome == Outcome.STATISTICS

    def test_denied_even_when_empty(self, aggregator):
        """Test that denial does not reveal whether data exists."""
        aggregator.set_location("bangalore")
        result = aggregator.snapshot("kochi")

        assert result.outcome == Outcome.DENIED
        assert result.statistics is None

    def test_empty_location_rejected(self, aggregator):
        """Test that a blank city is invalid and the stored city stays."""
        aggregator.set_location("bangalore")
        result = aggregator.set_location("   ")

        assert result.outcome == Outcome.INVALID_LOCATION
        assert result.location == "bangalore"
        assert aggregator.snapshot("bangalore").outcome == Outcome.EMPTY

    def test_location_is_trimmed(self, aggregator):
        """Test that the stored city is trimmed."""
        result = aggregator.set_location("  kochi  ")

        assert result.location == "kochi"
        assert aggregator.snapshot("kochi").outcome == Outcome.EMPTY

    def test_clear_location_when_unset(self, aggregator):
        """Test that clearing an unset location succeeds."""
        assert aggregator.clear_location().outcome == Outcome.LOCATION_CLEARED


class TestConcurrency:
    """Tests for concurrent access."""

    def test_concurrent_admissions(self, aggregator):
        """Test that concurrent admissions are all counted exactly once."""
        threads_count = 8
        per_thread = 200

        def worker(amount):
            for _ in range(per_thread):
                aggregator.admit(amount, NOW)

        threads = [
            threading.Thread(target=worker, args=(float(i + 1),))
            for i in range(threads_count)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = aggregator.snapshot(None).statistics
        assert stats.count == threads_count * per_thread
        assert stats.sum == pytest.approx(per_thread * sum(range(1, threads_count + 1)))
        assert stats.min == 1.0
        assert stats.max == float(threads_count)
        assert len(aggregator.ledger) == stats.count

    def test_reads_see_consistent_state(self, aggregator):
        """Test that a read never sees a count without its sum."""
        stop = threading.Event()
        errors = []

        def writer():
            while not stop.is_set():
                aggregator.admit(2.0, NOW)

        def reader():
            for _ in range(500):
                result = aggregator.snapshot(None)
                if result.statistics is not None:
                    stats = result.statistics
                    if stats.sum != 2.0 * stats.count:
                        errors.append(stats)

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        try:
            reader()
        finally:
            stop.set()
            writer_thread.join()

        assert errors == []


class TestAuditTrail:
    """Tests that operations leave audit events."""

    def test_admission_events(self, aggregator, audit_storage):
        """Test admitted and rejected transactions are both audited."""
        aggregator.admit(10.0, NOW)
        aggregator.admit(10.0, NOW - timedelta(hours=1))
        aggregator.admit(0, NOW)

        admitted = audit_storage.get_events_by_type(AuditEventType.TRANSACTION_ADMITTED)
        rejected = audit_storage.get_events_by_type(AuditEventType.TRANSACTION_REJECTED)

        assert len(admitted) == 1
        assert admitted[0].details["count"] == 1
        assert [e.details["reason"] for e in rejected] == ["stale_or_future", "malformed_input"]

    def test_denied_read_is_audited(self, aggregator, audit_storage):
        """Test that denied statistics reads are recorded."""
        aggregator.set_location("bangalore")
        aggregator.snapshot("kochi")

        denied = audit_storage.get_events_by_type(AuditEventType.STATISTICS_DENIED)
        assert len(denied) == 1
        assert denied[0].details["asserted_location"] == "kochi"

    def test_correlation_id_is_propagated(self, aggregator, audit_storage):
        """Test that events carry the caller's correlation id."""
        correlation_id = uuid4()

        aggregator.reset(correlation_id=correlation_id)

        events = audit_storage.get_events_by_correlation_id(correlation_id)
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.TRANSACTIONS_RESET

    def test_without_audit_logger(self, validator):
        """Test that the aggregator works with no audit logger at all."""
        aggregator = Aggregator(validator)
        assert aggregator.admit(1.0, NOW).outcome == Outcome.CREATED
        assert aggregator.snapshot(None).outcome == Outcome.STATISTICS


class TestFromSettings:
    """Tests for building an aggregator from settings."""

    def test_from_settings(self, clock):
        """Test that settings choose the zone and the window."""
        settings = AggregatorSettings(
            reference_timezone="Asia/Kolkata",
            freshness_window_seconds=10,
        )
        aggregator = Aggregator.from_settings(settings, clock=clock)

        assert aggregator.admit(1.0, NOW - timedelta(seconds=10)).outcome == Outcome.CREATED
        assert aggregator.admit(1.0, NOW - timedelta(seconds=11)).outcome == Outcome.STALE_OR_FUTURE
        assert aggregator.ledger[0].timestamp.tzinfo == IST


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
