"""
Storage Package

Provides the abstract audit storage interface and its in-memory
implementation. Designed to be swappable.
"""

from txstats.storage.interface import AuditStorageInterface, StorageError
from txstats.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
]
