"""
Data Models Package

This package contains all Pydantic models used in Nexus Ledger.
All data flowing through the system must conform to these schemas.
"""

from nexusledger.models.accounts import (
    ACCOUNTS_PAYABLE,
    ACCOUNTS_RECEIVABLE,
    CAPITAL_EQUITY,
    CASH_BANK,
    COST_OF_GOODS_SOLD,
    INVENTORY,
    OPERATING_EXPENSES,
    PREDEFINED_ACCOUNTS,
    SALES_REVENUE,
    AccountCategory,
    classify_account,
)
from nexusledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from nexusledger.models.ledger import (
    ERPData,
    LedgerEntry,
    LedgerSide,
    Product,
    StockStatus,
    Transaction,
    TransactionType,
    UserProfile,
    empty_books,
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
from nexusledger.models.results import (
    EngineError,
    ErrorKind,
    PostingResult,
    StockPolicy,
)
from nexusledger.models.validation import (
    SnapshotValidationResult,
    ValidationIssue,
)

__all__ = [
    # Books
    "ERPData",
    "LedgerEntry",
    "LedgerSide",
    "Product",
    "StockStatus",
    "Transaction",
    "TransactionType",
    "UserProfile",
    "empty_books",
    # Chart of accounts
    "ACCOUNTS_PAYABLE",
    "ACCOUNTS_RECEIVABLE",
    "CAPITAL_EQUITY",
    "CASH_BANK",
    "COST_OF_GOODS_SOLD",
    "INVENTORY",
    "OPERATING_EXPENSES",
    "PREDEFINED_ACCOUNTS",
    "SALES_REVENUE",
    "AccountCategory",
    "classify_account",
    # Engine results
    "EngineError",
    "ErrorKind",
    "PostingResult",
    "StockPolicy",
    # Reports
    "AccountBalance",
    "BalanceSheet",
    "DashboardMetrics",
    "IncomeStatement",
    "InventoryRow",
    "SalesTrendPoint",
    "TrialBalance",
    # Validation
    "SnapshotValidationResult",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
