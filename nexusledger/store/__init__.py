"""State store package."""

from nexusledger.store.state_store import StateStore, merge_posting

__all__ = ["StateStore", "merge_posting"]
