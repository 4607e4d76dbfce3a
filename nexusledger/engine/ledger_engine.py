"""
Ledger Engine

The accounting rules of the system, as pure functions.

Each operation receives the current product list and the parameters of
one business event, and returns a PostingResult with:
- the transaction record to append (purchases and sales)
- the ledger entries to append, always balanced per transaction id
- the complete next product list (purchases and sales)

DESIGN DECISION: No hidden state. Ids and timestamps come from the
`id_factory` and `now` arguments, so identical inputs (including those
two callables) produce identical outputs. The caller's lists are never
mutated; a new list is returned instead.

POSTING RULES:
- Purchase: Dr Inventory / Cr Cash, for quantity * unit cost.
  Every purchase is an immediate cash disbursement.
- Sale: Dr Cash / Cr Sales Revenue for quantity * unit price, and
  Dr Cost of Goods Sold / Cr Inventory for quantity * average cost.
- Manual entry: Dr <debit account> / Cr <credit account> for the amount.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Sequence, Union
from uuid import uuid4

from nexusledger.models.accounts import (
    CASH_BANK,
    COST_OF_GOODS_SOLD,
    INVENTORY,
    SALES_REVENUE,
)
from nexusledger.models.ledger import (
    LedgerEntry,
    Product,
    Transaction,
    TransactionType,
)
from nexusledger.models.results import ErrorKind, PostingResult, StockPolicy


Number = Union[Decimal, int, float, str]
IdFactory = Callable[[], str]
Clock = Callable[[], datetime]

ZERO = Decimal("0")
DEFAULT_MARKUP = Decimal("1.5")


def generate_id() -> str:
    """Practically collision-free id for one running instance."""
    return uuid4().hex[:12]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_decimal(value: Number) -> Optional[Decimal]:
    """Convert user input to a finite Decimal, or None if it is not a number."""
    if isinstance(value, bool):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def weighted_average_cost(
    old_quantity: Decimal,
    old_average_cost: Decimal,
    quantity: Decimal,
    unit_cost: Decimal,
) -> Decimal:
    """
    Average unit cost after adding `quantity` units at `unit_cost`.

    Defined as 0 when the combined quantity is zero or still negative
    (a backorder the purchase did not cover). A backordered starting
    quantity can also push the raw figure below zero once stock is
    positive again; average cost never goes negative, so that case is
    floored at 0.
    """
    total_quantity = old_quantity + quantity
    if total_quantity <= 0:
        return ZERO
    average = (old_quantity * old_average_cost + quantity * unit_cost) / total_quantity
    return max(average, ZERO)


def _balanced_pair(
    transaction_id: str,
    date: datetime,
    amount: Decimal,
    debit_account: str,
    debit_description: str,
    credit_account: str,
    credit_description: str,
    id_factory: IdFactory,
) -> list[LedgerEntry]:
    """One debit and one credit of the same amount."""
    return [
        LedgerEntry(
            id=id_factory(),
            transaction_id=transaction_id,
            date=date,
            description=debit_description,
            account=debit_account,
            debit=amount,
            credit=ZERO,
        ),
        LedgerEntry(
            id=id_factory(),
            transaction_id=transaction_id,
            date=date,
            description=credit_description,
            account=credit_account,
            debit=ZERO,
            credit=amount,
        ),
    ]


# =============================================================================
# PURCHASE
# =============================================================================

def record_purchase(
    product_name: str,
    sku: str,
    quantity: Number,
    unit_cost: Number,
    supplier: str,
    current_products: Sequence[Product],
    *,
    default_markup: Decimal = DEFAULT_MARKUP,
    id_factory: IdFactory = generate_id,
    now: Clock = utc_now,
) -> PostingResult:
    """
    Record stock bought from a supplier.

    An existing product (matched by sku) is restocked and its average
    cost re-weighted. An unknown sku creates a new product whose
    average cost is the unit cost and whose selling price is the unit
    cost times `default_markup`.
    """
    sku = (sku or "").strip()
    product_name = (product_name or "").strip()
    supplier = (supplier or "").strip()

    qty = _as_decimal(quantity)
    cost = _as_decimal(unit_cost)
    if qty is None or qty <= 0:
        return PostingResult.failure(
            ErrorKind.INVALID_AMOUNT,
            "Purchase quantity must be greater than zero.",
            quantity=str(quantity),
        )
    if cost is None or cost <= 0:
        return PostingResult.failure(
            ErrorKind.INVALID_AMOUNT,
            "Unit cost must be greater than zero.",
            unit_cost=str(unit_cost),
        )
    if not sku:
        return PostingResult.failure(
            ErrorKind.INVALID_INPUT,
            "SKU is required.",
        )

    existing_index = next(
        (i for i, p in enumerate(current_products) if p.sku == sku),
        None,
    )
    if existing_index is None and not product_name:
        return PostingResult.failure(
            ErrorKind.INVALID_INPUT,
            "Product name is required for a new SKU.",
            sku=sku,
        )

    transaction_id = id_factory()
    date = now()
    total_amount = qty * cost

    updated_products = list(current_products)
    if existing_index is not None:
        existing = updated_products[existing_index]
        product_id = existing.id
        product_name = product_name or existing.name
        updated_products[existing_index] = existing.model_copy(update={
            "quantity": existing.quantity + qty,
            "average_cost": weighted_average_cost(
                existing.quantity, existing.average_cost, qty, cost
            ),
        })
    else:
        product_id = id_factory()
        updated_products.append(Product(
            id=product_id,
            name=product_name,
            sku=sku,
            quantity=qty,
            average_cost=cost,
            selling_price=cost * default_markup,
        ))

    transaction = Transaction(
        id=transaction_id,
        type=TransactionType.PURCHASE,
        date=date,
        product_id=product_id,
        product_name=product_name,
        quantity=qty,
        unit_price=cost,
        total_amount=total_amount,
        party=supplier,
    )

    entries = _balanced_pair(
        transaction_id,
        date,
        total_amount,
        debit_account=INVENTORY,
        debit_description=f"Purchase of {product_name} from {supplier}",
        credit_account=CASH_BANK,
        credit_description=f"Payment to {supplier}",
        id_factory=id_factory,
    )

    return PostingResult(
        success=True,
        transaction=transaction,
        ledger_entries=entries,
        products=updated_products,
    )


# =============================================================================
# SALE
# =============================================================================

def record_sale(
    product_id: str,
    quantity: Number,
    unit_price: Number,
    customer: str,
    current_products: Sequence[Product],
    *,
    stock_policy: StockPolicy = StockPolicy.BLOCK,
    id_factory: IdFactory = generate_id,
    now: Clock = utc_now,
) -> PostingResult:
    """
    Record goods sold to a customer.

    Cost of goods sold uses the product's current average cost; a sale
    never changes the average cost. Posts two independent balanced
    pairs: the revenue pair and the cost recognition pair.
    """
    customer = (customer or "").strip()

    product = next((p for p in current_products if p.id == product_id), None)
    if product is None:
        return PostingResult.failure(
            ErrorKind.UNKNOWN_PRODUCT,
            "Product not found.",
            product_id=product_id,
        )

    qty = _as_decimal(quantity)
    price = _as_decimal(unit_price)
    if qty is None or qty <= 0:
        return PostingResult.failure(
            ErrorKind.INVALID_AMOUNT,
            "Sale quantity must be greater than zero.",
            quantity=str(quantity),
        )
    if price is None or price < 0:
        return PostingResult.failure(
            ErrorKind.INVALID_AMOUNT,
            "Unit price cannot be negative.",
            unit_price=str(unit_price),
        )
    if stock_policy == StockPolicy.BLOCK and qty > product.quantity:
        return PostingResult.failure(
            ErrorKind.INSUFFICIENT_STOCK,
            f"Insufficient stock. Only {product.quantity} available.",
            product_id=product.id,
            requested=str(qty),
            available=str(product.quantity),
        )

    transaction_id = id_factory()
    date = now()
    total_revenue = qty * price
    cost_of_goods_sold = qty * product.average_cost

    transaction = Transaction(
        id=transaction_id,
        type=TransactionType.SALE,
        date=date,
        product_id=product.id,
        product_name=product.name,
        quantity=qty,
        unit_price=price,
        total_amount=total_revenue,
        party=customer,
    )

    updated_products = [
        p.model_copy(update={"quantity": p.quantity - qty}) if p.id == product.id else p
        for p in current_products
    ]

    revenue_entries = _balanced_pair(
        transaction_id,
        date,
        total_revenue,
        debit_account=CASH_BANK,
        debit_description=f"Sale of {product.name} to {customer}",
        credit_account=SALES_REVENUE,
        credit_description=f"Revenue from {product.name}",
        id_factory=id_factory,
    )
    cogs_entries = _balanced_pair(
        transaction_id,
        date,
        cost_of_goods_sold,
        debit_account=COST_OF_GOODS_SOLD,
        debit_description=f"Cost of goods for {product.name} sale",
        credit_account=INVENTORY,
        credit_description=f"Inventory reduction for {product.name}",
        id_factory=id_factory,
    )

    return PostingResult(
        success=True,
        transaction=transaction,
        ledger_entries=revenue_entries + cogs_entries,
        products=updated_products,
    )


# =============================================================================
# MANUAL JOURNAL ENTRY
# =============================================================================

def record_manual_journal_entry(
    debit_account: str,
    credit_account: str,
    amount: Number,
    description: str,
    *,
    id_factory: IdFactory = generate_id,
    now: Clock = utc_now,
) -> PostingResult:
    """
    Post an entry outside the purchase/sale vocabulary (rent, owner
    capital, adjustments). Does not touch products or transactions.
    """
    debit_account = (debit_account or "").strip()
    credit_account = (credit_account or "").strip()
    description = (description or "").strip()

    value = _as_decimal(amount)
    if value is None or value <= 0:
        return PostingResult.failure(
            ErrorKind.INVALID_AMOUNT,
            "Amount must be greater than zero.",
            amount=str(amount),
        )
    if not debit_account or not credit_account:
        return PostingResult.failure(
            ErrorKind.INVALID_INPUT,
            "Both a debit and a credit account are required.",
        )
    if debit_account == credit_account:
        return PostingResult.failure(
            ErrorKind.INVALID_INPUT,
            "Debit and credit accounts must differ.",
            account=debit_account,
        )

    entries = _balanced_pair(
        id_factory(),
        now(),
        value,
        debit_account=debit_account,
        debit_description=description,
        credit_account=credit_account,
        credit_description=description,
        id_factory=id_factory,
    )
    return PostingResult(success=True, ledger_entries=entries)
