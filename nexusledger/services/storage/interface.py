"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the books in a local JSON file today
2. Use in-memory storage for testing
3. Swap in a database later without touching the engine
4. Keep business logic decoupled from storage implementation

The books are persisted as ONE opaque snapshot per key. Durability is
"last write wins" - each save replaces the whole snapshot.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from nexusledger.models.audit import AuditEvent


class SnapshotStorageInterface(ABC):
    """
    Abstract key-value store for JSON snapshots.

    Values are JSON-ready dicts; the storage never interprets them.
    """

    @abstractmethod
    async def load_snapshot(self, key: str) -> Optional[dict]:
        """
        Load the snapshot stored under a key.

        Returns:
            The stored dict, or None if nothing was saved yet

        Raises:
            StorageError: If the stored value exists but cannot be read
        """
        pass

    @abstractmethod
    async def save_snapshot(self, key: str, snapshot: dict) -> bool:
        """
        Replace the snapshot stored under a key.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def delete_snapshot(self, key: str) -> bool:
        """
        Remove the snapshot stored under a key.

        Returns:
            True if something was deleted
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one user action).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
