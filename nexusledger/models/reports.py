"""
Report Models

Read models derived from the books. None of these are persisted;
they are rebuilt from the current snapshot every time they are asked for.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from nexusledger.models.accounts import AccountCategory
from nexusledger.models.ledger import StockStatus


class AccountBalance(BaseModel):
    """One row of the trial balance."""

    account: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    category: Optional[AccountCategory] = None

    @property
    def net(self) -> Decimal:
        return abs(self.debit - self.credit)

    @property
    def net_side(self) -> str:
        """'Dr' when debits are larger, otherwise 'Cr'."""
        return "Dr" if self.debit > self.credit else "Cr"


class TrialBalance(BaseModel):
    """Every account's debit and credit totals."""

    rows: list[AccountBalance] = Field(default_factory=list)
    total_debit: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def get(self, account: str) -> Optional[AccountBalance]:
        return next((row for row in self.rows if row.account == account), None)


class DashboardMetrics(BaseModel):
    """
    Headline figures.

    `net_cash_flow` is revenue minus purchases: a cash-basis
    approximation, not a cash-flow statement.
    """

    total_stock_value: Decimal
    total_revenue: Decimal
    total_purchases: Decimal
    net_cash_flow: Decimal
    product_count: int
    sale_count: int
    purchase_count: int


class InventoryRow(BaseModel):
    """A product as shown in the inventory table."""

    product_id: str
    sku: str
    name: str
    quantity: Decimal
    average_cost: Decimal
    selling_price: Decimal
    total_value: Decimal
    status: StockStatus


class SalesTrendPoint(BaseModel):
    """One sale plotted on the dashboard trend."""

    date: datetime
    amount: Decimal


class IncomeStatement(BaseModel):
    """Revenue against expenses, from revenue/expense accounts only."""

    revenue: Decimal
    expenses: Decimal
    revenue_by_account: dict[str, Decimal] = Field(default_factory=dict)
    expenses_by_account: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def net_income(self) -> Decimal:
        return self.revenue - self.expenses


class BalanceSheet(BaseModel):
    """
    Assets against liabilities and equity.

    `retained_earnings` is the current net income, which has not been
    closed into an equity account.
    """

    assets: Decimal
    liabilities: Decimal
    equity: Decimal
    retained_earnings: Decimal
    assets_by_account: dict[str, Decimal] = Field(default_factory=dict)
    liabilities_by_account: dict[str, Decimal] = Field(default_factory=dict)
    equity_by_account: dict[str, Decimal] = Field(default_factory=dict)
    unclassified_accounts: list[str] = Field(default_factory=list)

    @property
    def is_balanced(self) -> bool:
        return self.assets == self.liabilities + self.equity + self.retained_earnings
