"""
Reporting

DESIGN DECISION: Every report is a plain fold over the current snapshot.
No caching, no incremental counters. At single-business volumes a full
recomputation is cheap, and it means a report can never drift from
the books it describes.
"""

from collections import defaultdict
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from nexusledger.models.accounts import AccountCategory, classify_account
from nexusledger.models.ledger import (
    ERPData,
    LedgerEntry,
    Product,
    StockStatus,
    Transaction,
    TransactionType,
)
from nexusledger.models.reports import (
    AccountBalance,
    BalanceSheet,
    DashboardMetrics,
    IncomeStatement,
    InventoryRow,
    SalesTrendPoint,
    TrialBalance,
)


ZERO = Decimal("0")
LOW_STOCK_THRESHOLD = 5


# =============================================================================
# LEDGER
# =============================================================================

def trial_balance(ledger: Iterable[LedgerEntry]) -> TrialBalance:
    """
    Group entries by account and total each side independently.

    Rows appear in the order their account first shows up in the ledger.
    """
    totals: dict[str, list[Decimal]] = {}
    for entry in ledger:
        sides = totals.setdefault(entry.account, [ZERO, ZERO])
        sides[0] += entry.debit
        sides[1] += entry.credit

    rows = [
        AccountBalance(
            account=account,
            debit=debit,
            credit=credit,
            category=classify_account(account),
        )
        for account, (debit, credit) in totals.items()
    ]
    return TrialBalance(
        rows=rows,
        total_debit=sum((row.debit for row in rows), ZERO),
        total_credit=sum((row.credit for row in rows), ZERO),
    )


def unbalanced_groups(ledger: Iterable[LedgerEntry]) -> dict[str, Decimal]:
    """
    Transaction ids whose debits differ from their credits.

    Maps each offending id to debit minus credit. Empty for healthy books.
    """
    differences: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in ledger:
        differences[entry.transaction_id] += entry.debit - entry.credit
    return {tid: diff for tid, diff in differences.items() if diff != ZERO}


def ledger_newest_first(ledger: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Journal view order. Entries posted together keep their order."""
    return sorted(ledger, key=lambda e: _as_aware(e.date), reverse=True)


def _signed_balance(row: AccountBalance) -> Decimal:
    """Balance on the account's normal side."""
    if row.category in (AccountCategory.ASSET, AccountCategory.EXPENSE):
        return row.debit - row.credit
    return row.credit - row.debit


def income_statement(ledger: Iterable[LedgerEntry]) -> IncomeStatement:
    """Revenue and expense accounts only."""
    revenue: dict[str, Decimal] = {}
    expenses: dict[str, Decimal] = {}
    for row in trial_balance(ledger).rows:
        if row.category == AccountCategory.REVENUE:
            revenue[row.account] = _signed_balance(row)
        elif row.category == AccountCategory.EXPENSE:
            expenses[row.account] = _signed_balance(row)

    return IncomeStatement(
        revenue=sum(revenue.values(), ZERO),
        expenses=sum(expenses.values(), ZERO),
        revenue_by_account=revenue,
        expenses_by_account=expenses,
    )


def balance_sheet(ledger: Sequence[LedgerEntry]) -> BalanceSheet:
    """Asset, liability and equity accounts, plus current net income."""
    buckets: dict[AccountCategory, dict[str, Decimal]] = {
        AccountCategory.ASSET: {},
        AccountCategory.LIABILITY: {},
        AccountCategory.EQUITY: {},
    }
    unclassified: list[str] = []

    for row in trial_balance(ledger).rows:
        if row.category in buckets:
            buckets[row.category][row.account] = _signed_balance(row)
        elif row.category is None:
            unclassified.append(row.account)

    assets = buckets[AccountCategory.ASSET]
    liabilities = buckets[AccountCategory.LIABILITY]
    equity = buckets[AccountCategory.EQUITY]

    return BalanceSheet(
        assets=sum(assets.values(), ZERO),
        liabilities=sum(liabilities.values(), ZERO),
        equity=sum(equity.values(), ZERO),
        retained_earnings=income_statement(ledger).net_income,
        assets_by_account=assets,
        liabilities_by_account=liabilities,
        equity_by_account=equity,
        unclassified_accounts=unclassified,
    )


# =============================================================================
# INVENTORY
# =============================================================================

def stock_status(
    quantity: Decimal,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> StockStatus:
    """Out of Stock at exactly zero, Low Stock below the threshold."""
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity < low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def total_stock_value(products: Iterable[Product]) -> Decimal:
    return sum((p.quantity * p.average_cost for p in products), ZERO)


def inventory_valuation(
    products: Iterable[Product],
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> list[InventoryRow]:
    """Inventory table rows, most valuable holding first."""
    rows = [
        InventoryRow(
            product_id=p.id,
            sku=p.sku,
            name=p.name,
            quantity=p.quantity,
            average_cost=p.average_cost,
            selling_price=p.selling_price,
            total_value=p.quantity * p.average_cost,
            status=stock_status(p.quantity, low_stock_threshold),
        )
        for p in products
    ]
    return sorted(rows, key=lambda row: row.total_value, reverse=True)


def sellable_products(products: Iterable[Product]) -> list[Product]:
    """Products with something on hand."""
    return [p for p in products if p.quantity > 0]


# =============================================================================
# TRANSACTIONS
# =============================================================================

def _total(transactions: Iterable[Transaction], kind: TransactionType) -> Decimal:
    return sum((t.total_amount for t in transactions if t.type == kind), ZERO)


def dashboard_metrics(data: ERPData) -> DashboardMetrics:
    """Stock value, revenue, purchases and the simplified net cash flow."""
    revenue = _total(data.transactions, TransactionType.SALE)
    purchases = _total(data.transactions, TransactionType.PURCHASE)
    return DashboardMetrics(
        total_stock_value=total_stock_value(data.products),
        total_revenue=revenue,
        total_purchases=purchases,
        net_cash_flow=revenue - purchases,
        product_count=len(data.products),
        sale_count=sum(1 for t in data.transactions if t.type == TransactionType.SALE),
        purchase_count=sum(1 for t in data.transactions if t.type == TransactionType.PURCHASE),
    )


def sales_trend(transactions: Sequence[Transaction], limit: int = 7) -> list[SalesTrendPoint]:
    """The most recent `limit` sales, in the order they were recorded."""
    sales = [t for t in transactions if t.type == TransactionType.SALE]
    recent = sales[-limit:] if limit > 0 else []
    return [SalesTrendPoint(date=t.date, amount=t.total_amount) for t in recent]


def _as_aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def filter_transactions(
    transactions: Iterable[Transaction],
    kind: Optional[TransactionType] = None,
    search: Optional[str] = None,
    party: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[Transaction]:
    """
    Transactions matching every given filter, newest first.

    `search` matches product name or party, case-insensitively.
    `party` is a case-insensitive substring match.
    Dates are inclusive whole days (UTC).
    """
    needle = (search or "").strip().lower()
    party_needle = (party or "").strip().lower()
    start = datetime.combine(date_from, time.min, tzinfo=timezone.utc) if date_from else None
    end = datetime.combine(date_to, time.max, tzinfo=timezone.utc) if date_to else None

    matches = []
    for t in transactions:
        if kind is not None and t.type != kind:
            continue
        if needle and needle not in t.product_name.lower() and needle not in t.party.lower():
            continue
        if party_needle and party_needle not in t.party.lower():
            continue
        moment = _as_aware(t.date)
        if start and moment < start:
            continue
        if end and moment > end:
            continue
        matches.append(t)

    return sorted(matches, key=lambda t: _as_aware(t.date), reverse=True)


def parties(transactions: Iterable[Transaction], kind: TransactionType) -> list[str]:
    """Distinct suppliers (PURCHASE) or customers (SALE), first seen first."""
    seen: dict[str, None] = {}
    for t in transactions:
        if t.type == kind and t.party:
            seen.setdefault(t.party, None)
    return list(seen)
