"""Reporting package."""

from nexusledger.reports.reporting import (
    LOW_STOCK_THRESHOLD,
    balance_sheet,
    dashboard_metrics,
    filter_transactions,
    income_statement,
    inventory_valuation,
    ledger_newest_first,
    parties,
    sales_trend,
    sellable_products,
    stock_status,
    total_stock_value,
    trial_balance,
    unbalanced_groups,
)

__all__ = [
    "LOW_STOCK_THRESHOLD",
    "balance_sheet",
    "dashboard_metrics",
    "filter_transactions",
    "income_statement",
    "inventory_valuation",
    "ledger_newest_first",
    "parties",
    "sales_trend",
    "sellable_products",
    "stock_status",
    "total_stock_value",
    "trial_balance",
    "unbalanced_groups",
]
