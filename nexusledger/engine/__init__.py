"""Ledger engine package."""

from nexusledger.engine.ledger_engine import (
    DEFAULT_MARKUP,
    generate_id,
    record_manual_journal_entry,
    record_purchase,
    record_sale,
    utc_now,
    weighted_average_cost,
)

__all__ = [
    "DEFAULT_MARKUP",
    "generate_id",
    "record_manual_journal_entry",
    "record_purchase",
    "record_sale",
    "utc_now",
    "weighted_average_cost",
]
