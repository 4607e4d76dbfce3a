"""
Chart of Accounts

Account names on ledger entries are free text - a manual journal
entry can post to anything the user types. The engine itself only ever
uses the four standard labels below.

For reporting we still need to know whether an account belongs on the
balance sheet or the income statement, so every label is classified
into one of five categories. Well-known labels map directly; anything
else is classified by keyword and may come back unclassified.
"""

import re
from enum import Enum
from typing import Optional


class AccountCategory(str, Enum):
    """Top-level account categories."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


# Labels the engine posts to
CASH_BANK = "Cash / Bank"
INVENTORY = "Inventory (Asset)"
SALES_REVENUE = "Sales Revenue"
COST_OF_GOODS_SOLD = "Cost of Goods Sold (Expense)"

# Suggested labels for manual journal entries
ACCOUNTS_RECEIVABLE = "Accounts Receivable"
ACCOUNTS_PAYABLE = "Accounts Payable"
OPERATING_EXPENSES = "Operating Expenses"
CAPITAL_EQUITY = "Capital / Equity"

PREDEFINED_ACCOUNTS: tuple[str, ...] = (
    CASH_BANK,
    INVENTORY,
    ACCOUNTS_RECEIVABLE,
    ACCOUNTS_PAYABLE,
    SALES_REVENUE,
    COST_OF_GOODS_SOLD,
    OPERATING_EXPENSES,
    CAPITAL_EQUITY,
)

_KNOWN: dict[str, AccountCategory] = {
    CASH_BANK: AccountCategory.ASSET,
    INVENTORY: AccountCategory.ASSET,
    ACCOUNTS_RECEIVABLE: AccountCategory.ASSET,
    ACCOUNTS_PAYABLE: AccountCategory.LIABILITY,
    SALES_REVENUE: AccountCategory.REVENUE,
    COST_OF_GOODS_SOLD: AccountCategory.EXPENSE,
    OPERATING_EXPENSES: AccountCategory.EXPENSE,
    CAPITAL_EQUITY: AccountCategory.EQUITY,
}

# Checked in order; first match wins. Balance-sheet words come first so
# "Accrued Salaries Payable" or "Prepaid Rent" land on the balance sheet.
_KEYWORDS: tuple[tuple[str, AccountCategory], ...] = (
    ("payable", AccountCategory.LIABILITY),
    ("unearned", AccountCategory.LIABILITY),
    ("accrued", AccountCategory.LIABILITY),
    ("deferred", AccountCategory.LIABILITY),
    ("loan", AccountCategory.LIABILITY),
    ("liabilit", AccountCategory.LIABILITY),
    ("prepaid", AccountCategory.ASSET),
    ("receivable", AccountCategory.ASSET),
    ("asset", AccountCategory.ASSET),
    ("cash", AccountCategory.ASSET),
    ("bank", AccountCategory.ASSET),
    ("inventory", AccountCategory.ASSET),
    ("equipment", AccountCategory.ASSET),
    ("equity", AccountCategory.EQUITY),
    ("capital", AccountCategory.EQUITY),
    ("drawing", AccountCategory.EQUITY),
    ("expense", AccountCategory.EXPENSE),
    ("cost of", AccountCategory.EXPENSE),
    ("rent", AccountCategory.EXPENSE),
    ("salar", AccountCategory.EXPENSE),
    ("wage", AccountCategory.EXPENSE),
    ("utilit", AccountCategory.EXPENSE),
    ("revenue", AccountCategory.REVENUE),
    ("income", AccountCategory.REVENUE),
    ("sales", AccountCategory.REVENUE),
)

# Keywords match at the start of a word: "rent" is not found in "Current"
_KEYWORD_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(keyword)}"), category)
    for keyword, category in _KEYWORDS
)


def classify_account(account: str) -> Optional[AccountCategory]:
    """
    Classify an account label.

    Returns None when the label gives no hint.
    """
    label = (account or "").strip()
    if label in _KNOWN:
        return _KNOWN[label]

    lowered = label.lower()
    for pattern, category in _KEYWORD_PATTERNS:
        if pattern.search(lowered):
            return category
    return None
