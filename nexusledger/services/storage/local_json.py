"""
Local JSON Storage Implementation

DESIGN DECISION: The books live in one JSON file per key on local disk:
1. No database setup required
2. The file is the same shape as an exported backup
3. Users can copy or inspect it directly

TRADEOFFS:
- Last write wins; there is no multi-process coordination
- The whole snapshot is rewritten on every save (fine at this volume)

Writes go to a temporary file first and are then renamed over the old
snapshot, so a crash mid-write leaves the previous snapshot intact.
"""

import json
import os
import re
from pathlib import Path
from typing import Optional
from uuid import UUID

import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from nexusledger.models.audit import AuditEvent
from nexusledger.services.storage.interface import (
    AuditStorageInterface,
    SnapshotStorageInterface,
    StorageError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

logger = structlog.get_logger(__name__)


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Snapshot storage backed by `<data_dir>/<key>.json`.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key or ""):
            raise StorageError(f"Invalid snapshot key: {key!r}")
        return self._data_dir / f"{key}.json"

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)

    async def load_snapshot(self, key: str) -> Optional[dict]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read snapshot {path}: {e}") from e

    async def save_snapshot(self, key: str, snapshot: dict) -> bool:
        path = self._path_for(key)
        try:
            text = json.dumps(snapshot, ensure_ascii=False, indent=2)
            self._write_atomic(path, text)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not save snapshot {path}: {e}") from e
        logger.debug("snapshot_written", path=str(path), size=len(text))
        return True

    async def delete_snapshot(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Could not delete snapshot {path}: {e}") from e
        return True


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON event per line.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _append_line(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    def _read_all(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []

        events = []
        with self._path.open("r", encoding="utf-8") as fh:
            for line_no, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(AuditEvent.model_validate_json(line))
                except ValidationError as e:
                    # A torn last line should not hide the rest of the log
                    logger.warning(
                        "audit_line_unreadable",
                        path=str(self._path),
                        line=line_no,
                        error=str(e),
                    )
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        try:
            self._append_line(event.model_dump_json())
        except OSError as e:
            raise StorageError(f"Could not append audit event: {e}") from e
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._read_all() if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._read_all(), key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
