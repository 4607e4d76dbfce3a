"""
In-memory storage, for tests and for running without a data directory.
"""

import copy
from typing import Optional
from uuid import UUID

from nexusledger.models.audit import AuditEvent
from nexusledger.services.storage.interface import (
    AuditStorageInterface,
    SnapshotStorageInterface,
)


class InMemorySnapshotStorage(SnapshotStorageInterface):

    def __init__(self):
        self._snapshots: dict[str, dict] = {}
        self.save_count = 0

    async def load_snapshot(self, key: str) -> Optional[dict]:
        snapshot = self._snapshots.get(key)
        return copy.deepcopy(snapshot) if snapshot is not None else None

    async def save_snapshot(self, key: str, snapshot: dict) -> bool:
        self._snapshots[key] = copy.deepcopy(snapshot)
        self.save_count += 1
        return True

    async def delete_snapshot(self, key: str) -> bool:
        return self._snapshots.pop(key, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self.events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]
