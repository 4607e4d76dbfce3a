"""
Core Data Models for Nexus Ledger

These models define the strict schemas for the books:
products (inventory), transactions (purchase/sale events) and
ledger entries (one side of a double-entry posting).

They are designed to:
1. Enforce type safety at runtime
2. Serialize to the same camelCase JSON snapshot the app has always used
3. Keep money exact (Decimal, never float)

DESIGN DECISION: Transactions and ledger entries are frozen.
The books are append-only; nothing is edited after it is posted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Business events that move stock."""
    PURCHASE = "PURCHASE"
    SALE = "SALE"


class LedgerSide(str, Enum):
    """Side of a posting."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class StockStatus(str, Enum):
    """Derived from a product's quantity on hand."""
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


# Shared config: camelCase on the wire, snake_case in Python
_SNAPSHOT_CONFIG = dict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


# =============================================================================
# INVENTORY
# =============================================================================

class Product(BaseModel):
    """
    A stock-keeping unit.

    `sku` is the natural key a purchase uses to decide whether it is
    restocking an existing product or introducing a new one.

    `quantity` is signed: a backordered product can go below zero.
    `average_cost` only changes on purchases.
    """
    model_config = ConfigDict(**_SNAPSHOT_CONFIG)

    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    sku: str = Field(default="")
    quantity: Decimal = Field(default=Decimal("0"))
    average_cost: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Weighted average unit cost"
    )
    selling_price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Advisory default price for sales"
    )

    @property
    def stock_value(self) -> Decimal:
        return self.quantity * self.average_cost


# =============================================================================
# EVENTS AND POSTINGS
# =============================================================================

class Transaction(BaseModel):
    """
    An immutable record of one purchase or sale.

    `unit_price` is the unit cost for a purchase and the unit price for
    a sale. `product_name` is a snapshot taken when the event happened.
    """
    model_config = ConfigDict(frozen=True, **_SNAPSHOT_CONFIG)

    id: str = Field(..., min_length=1)
    type: TransactionType
    date: datetime
    product_id: str
    product_name: str = Field(default="")
    quantity: Decimal
    unit_price: Decimal
    total_amount: Decimal
    party: str = Field(
        default="",
        description="Supplier for a purchase, customer for a sale"
    )


class LedgerEntry(BaseModel):
    """
    One side of a double-entry posting.

    Entries that belong together share a `transaction_id`; within such a
    group the debits always sum to the credits.
    """
    model_config = ConfigDict(frozen=True, **_SNAPSHOT_CONFIG)

    id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    date: datetime
    description: str = Field(default="")
    account: str = Field(..., min_length=1)
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def side(self) -> LedgerSide:
        return LedgerSide.DEBIT if self.debit > 0 else LedgerSide.CREDIT


# =============================================================================
# AGGREGATE ROOT
# =============================================================================

class UserProfile(BaseModel):
    """Who is keeping these books."""
    model_config = ConfigDict(**_SNAPSHOT_CONFIG)

    name: str = ""
    business_name: str = ""
    location: str = ""
    role: Optional[str] = None
    industry: Optional[str] = None


class ERPData(BaseModel):
    """
    Everything the business has recorded.

    Held in memory as one value and persisted as one opaque blob.
    """
    model_config = ConfigDict(**_SNAPSHOT_CONFIG)

    user_profile: Optional[UserProfile] = Field(default_factory=UserProfile)
    products: list[Product] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    ledger: list[LedgerEntry] = Field(default_factory=list)

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def find_product_by_sku(self, sku: str) -> Optional[Product]:
        return next((p for p in self.products if p.sku == sku), None)

    def to_snapshot_dict(self) -> dict:
        """JSON-ready dict with the camelCase snapshot keys."""
        return self.model_dump(mode="json", by_alias=True)


def empty_books() -> ERPData:
    """Initial data for a business that has recorded nothing yet."""
    return ERPData(
        user_profile=UserProfile(name="", business_name="", location="", role="", industry=""),
        products=[],
        transactions=[],
        ledger=[],
    )
