"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persisting
the books snapshot and the audit log. Local JSON files by default,
in-memory for tests.
"""

from nexusledger.services.storage.interface import (
    AuditStorageInterface,
    SnapshotStorageInterface,
    StorageError,
)
from nexusledger.services.storage.local_json import (
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
)
from nexusledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "StorageError",
    # Local JSON implementation
    "JsonFileSnapshotStorage",
    "JsonLinesAuditStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
]
