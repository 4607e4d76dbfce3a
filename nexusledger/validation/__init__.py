"""Snapshot validation package."""

from nexusledger.validation.validator import SnapshotValidator

__all__ = ["SnapshotValidator"]
