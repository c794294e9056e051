"""
Aggregator - orchestration for one account

This module ties together the temporal validator, the ledger, the
running aggregate and the location gate, and defines the five
operations the transport layer may call:
1. admit          (validate -> append -> update)
2. snapshot       (authorize -> read aggregate)
3. reset          (clear ledger and aggregate, keep location)
4. set_location
5. clear_location

DESIGN DECISION: The aggregator enforces the boundaries:
- Nothing touches state until validation has passed
- A rejected admission leaves the ledger and the aggregate untouched
- A denied read learns nothing, not even whether data exists
- One lock covers every operation as a whole

Every operation returns a result model naming its outcome. Expected
conditions are never raised to the caller.
"""

import math
import threading
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from txstats.audit import AuditLogger
from txstats.config import AggregatorSettings
from txstats.core.aggregate import RunningAggregate
from txstats.core.ledger import Ledger
from txstats.core.location import InvalidLocationError, LocationGate
from txstats.core.temporal import Clock, TemporalValidator, is_zero_timestamp, system_clock
from txstats.models.transaction import (
    AdmissionResult,
    Authorization,
    LocationResult,
    Outcome,
    ResetResult,
    SnapshotResult,
    Transaction,
)


class Aggregator:
    """
    Owns all state for the single account this process manages.

    Construct one at startup and hand it to every request handler.
    """

    def __init__(
        self,
        validator: TemporalValidator,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator
        self._ledger = Ledger()
        self._aggregate = RunningAggregate()
        self._gate = LocationGate()
        self._audit_logger = audit_logger
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: AggregatorSettings,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = system_clock,
    ) -> "Aggregator":
        validator = TemporalValidator(
            reference_zone=settings.zone,
            freshness_window=timedelta(seconds=settings.freshness_window_seconds),
            clock=clock,
        )
        return cls(validator, audit_logger=audit_logger)

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def ledger(self) -> tuple[Transaction, ...]:
        """Read-only copy of every admitted transaction, oldest first."""
        with self._lock:
            return self._ledger.all()

    def admit(
        self,
        amount: float,
        timestamp: Optional[datetime],
        correlation_id: Optional[UUID] = None,
    ) -> AdmissionResult:
        """
        Admit a transaction.

        Zero or non-finite amounts and missing timestamps are MALFORMED_INPUT
        before any freshness check runs. Otherwise the temporal validator
        decides.
        """
        count = 0
        if amount == 0 or not math.isfinite(amount) or is_zero_timestamp(timestamp):
            result = AdmissionResult(
                outcome=Outcome.MALFORMED_INPUT,
                message="Amount must be finite and non-zero, and timestamp must be set",
            )
        else:
            with self._lock:
                result, count = self._admit_locked(amount, timestamp)

        if self._audit_logger:
            if result.created:
                self._audit_logger.log_transaction_admitted(
                    amount=amount,
                    timestamp=result.transaction.timestamp,
                    count=count,
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_transaction_rejected(
                    reason=result.outcome.value,
                    message=result.message,
                    amount=amount,
                    correlation_id=correlation_id,
                )

        return result

    def _admit_locked(
        self,
        amount: float,
        timestamp: datetime,
    ) -> tuple[AdmissionResult, int]:
        """Returns the result and the admission count after it."""
        check = self._validator.validate(timestamp)
        if not check.is_valid:
            result = AdmissionResult(outcome=check.rejection, message=check.message)
            return result, self._aggregate.count

        transaction = Transaction(amount=amount, timestamp=check.normalized)
        # Append and update together; nothing above can leave partial state.
        self._ledger.append(transaction)
        self._aggregate.update(amount)

        result = AdmissionResult(
            outcome=Outcome.CREATED,
            message="transaction inserted",
            transaction=transaction,
        )
        return result, self._aggregate.count

    def snapshot(
        self,
        asserted_location: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> SnapshotResult:
        """
        Read the statistics, if the asserted location is authorized.
        """
        with self._lock:
            if self._gate.authorize(asserted_location) == Authorization.DENIED:
                result = SnapshotResult(outcome=Outcome.DENIED, message="unauthorized")
            else:
                statistics = self._aggregate.snapshot()
                if statistics is None:
                    result = SnapshotResult(
                        outcome=Outcome.EMPTY,
                        message="transactions not found",
                    )
                else:
                    result = SnapshotResult(
                        outcome=Outcome.STATISTICS,
                        message="ok",
                        statistics=statistics,
                    )

        if self._audit_logger:
            if result.outcome == Outcome.DENIED:
                self._audit_logger.log_statistics_denied(
                    asserted_location=asserted_location or "",
                    correlation_id=correlation_id,
                )
            elif result.outcome == Outcome.EMPTY:
                self._audit_logger.log_statistics_empty(correlation_id=correlation_id)
            else:
                self._audit_logger.log_statistics_served(
                    count=result.statistics.count,
                    correlation_id=correlation_id,
                )

        return result

    def reset(self, correlation_id: Optional[UUID] = None) -> ResetResult:
        """Clear every transaction. The location is left as it is."""
        with self._lock:
            discarded = self._ledger.clear()
            self._aggregate.reset()

        if self._audit_logger:
            self._audit_logger.log_transactions_reset(
                discarded_count=discarded,
                correlation_id=correlation_id,
            )

        return ResetResult(discarded_count=discarded)

    def set_location(
        self,
        candidate: str,
        correlation_id: Optional[UUID] = None,
    ) -> LocationResult:
        with self._lock:
            try:
                stored = self._gate.set_location(candidate)
            except InvalidLocationError as e:
                result = LocationResult(
                    outcome=Outcome.INVALID_LOCATION,
                    message=str(e),
                    location=self._gate.location.value or None,
                )
            else:
                result = LocationResult(
                    outcome=Outcome.LOCATION_SET,
                    message="location updated",
                    location=stored,
                )

        if self._audit_logger:
            if result.outcome == Outcome.LOCATION_SET:
                self._audit_logger.log_location_set(
                    location=result.location,
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_location_rejected(
                    candidate=candidate,
                    correlation_id=correlation_id,
                )

        return result

    def clear_location(self, correlation_id: Optional[UUID] = None) -> LocationResult:
        with self._lock:
            self._gate.clear_location()

        if self._audit_logger:
            self._audit_logger.log_location_cleared(correlation_id=correlation_id)

        return LocationResult(outcome=Outcome.LOCATION_CLEARED, message="location reset")
