"""
In-Memory Audit Storage

Keeps the most recent audit events in a bounded buffer.
Oldest events fall off once capacity is reached; nothing is
ever modified in place.
"""

import threading
from collections import deque
from uuid import UUID

from txstats.models.audit import AuditEvent, AuditEventType
from txstats.storage.interface import AuditStorageInterface


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Process-local audit trail.

    Safe to share between request threads.
    """

    def __init__(self, capacity: int = 10000):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._events: deque[AuditEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        with self._lock:
            return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_type(
        self,
        event_type: AuditEventType,
    ) -> list[AuditEvent]:
        with self._lock:
            return [e for e in self._events if e.event_type == event_type]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        with self._lock:
            events = list(self._events)
        return list(reversed(events))[:limit]
