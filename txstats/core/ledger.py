"""
Transaction Ledger

Append-only record of every admitted transaction, in admission order.

The ledger is kept for completeness and audit. Statistics never read it:
they come from the running aggregate.
"""

from txstats.models.transaction import Transaction


class Ledger:
    """
    Ordered, append-only sequence of admitted transactions.

    No validation happens here: callers append only what already
    passed admission. Entries are never mutated or removed individually.
    """

    def __init__(self):
        self._entries: list[Transaction] = []

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, transaction: Transaction) -> None:
        self._entries.append(transaction)

    def clear(self) -> int:
        """Discard every entry. Returns how many were discarded."""
        discarded = len(self._entries)
        self._entries = []
        return discarded

    def all(self) -> tuple[Transaction, ...]:
        """Read-only view of every entry, oldest first."""
        return tuple(self._entries)
