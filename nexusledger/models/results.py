"""
Ledger engine result values.

CRITICAL: The engine never raises for a business-rule failure.
Every operation returns a PostingResult that is either a success
carrying the new entries, or a failure carrying an EngineError.
A failed result carries no entries and no product changes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from nexusledger.models.ledger import LedgerEntry, Product, Transaction


class ErrorKind(str, Enum):
    """Why the engine refused an event."""
    UNKNOWN_PRODUCT = "unknown_product"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_INPUT = "invalid_input"


class StockPolicy(str, Enum):
    """
    What a sale may do when it asks for more than is on hand.

    BLOCK rejects the sale. ALLOW_BACKORDER lets quantity go negative.
    """
    BLOCK = "block"
    ALLOW_BACKORDER = "allow_backorder"


class EngineError(BaseModel):
    """A refused event, with enough detail for the caller to explain it."""

    kind: ErrorKind
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class PostingResult(BaseModel):
    """
    Outcome of one engine call.

    `products` is the complete next product list, or None when the
    event does not touch inventory (manual journal entries, failures).
    """

    success: bool
    error: Optional[EngineError] = None
    transaction: Optional[Transaction] = None
    ledger_entries: list[LedgerEntry] = Field(default_factory=list)
    products: Optional[list[Product]] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "PostingResult":
        """A failure must carry a reason and nothing else."""
        if self.success and self.error is not None:
            raise ValueError("Successful result cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("Failed result must carry an error")
            if self.transaction or self.ledger_entries or self.products is not None:
                raise ValueError("Failed result cannot carry changes")
        return self

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        **details: Any,
    ) -> "PostingResult":
        return cls(
            success=False,
            error=EngineError(kind=kind, message=message, details=details),
        )

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def transaction_id(self) -> Optional[str]:
        """Grouping id shared by the posted entries."""
        if self.ledger_entries:
            return self.ledger_entries[0].transaction_id
        return None
