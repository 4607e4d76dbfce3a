"""
Tests for Nexus Ledger

Test strategy:
1. Unit tests for individual components (models, engine, reports, validators)
2. Integration tests for flows (with in-memory storage and fake AI models)
3. No real API calls in tests
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from nexusledger.models.accounts import (
    CAPITAL_EQUITY,
    CASH_BANK,
    COST_OF_GOODS_SOLD,
    INVENTORY,
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
    Transaction,
    TransactionType,
    UserProfile,
    empty_books,
)
from nexusledger.models.results import EngineError, ErrorKind, PostingResult
from nexusledger.models.validation import SnapshotValidationResult, ValidationIssue


NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def make_books() -> ERPData:
    return ERPData(
        user_profile=UserProfile(name="Ana", business_name="Ana's Shop", location="Porto"),
        products=[
            Product(
                id="p1",
                name="Widget",
                sku="W-1",
                quantity=Decimal("12"),
                average_cost=Decimal("3.00"),
                selling_price=Decimal("4.50"),
            ),
        ],
        transactions=[
            Transaction(
                id="t1",
                type=TransactionType.PURCHASE,
                date=NOW,
                product_id="p1",
                product_name="Widget",
                quantity=Decimal("12"),
                unit_price=Decimal("3.00"),
                total_amount=Decimal("36.00"),
                party="Acme",
            ),
        ],
        ledger=[
            LedgerEntry(
                id="e1", transaction_id="t1", date=NOW, description="Purchase",
                account=INVENTORY, debit=Decimal("36.00"),
            ),
            LedgerEntry(
                id="e2", transaction_id="t1", date=NOW, description="Payment",
                account=CASH_BANK, credit=Decimal("36.00"),
            ),
        ],
    )


class TestLedgerModels:
    """Tests for the books models."""

    def test_product_creation(self):
        """Test Product model creation and stock value."""
        product = Product(
            id="p1",
            name="Widget",
            sku="W-1",
            quantity=Decimal("4"),
            average_cost=Decimal("2.50"),
        )
        assert product.stock_value == Decimal("10.00")
        assert product.selling_price == Decimal("0")

    def test_product_strips_whitespace(self):
        """Test that whitespace is stripped from names and SKUs."""
        product = Product(id="p1", name="  Widget  ", sku=" W-1 ")
        assert product.name == "Widget"
        assert product.sku == "W-1"

    def test_product_rejects_negative_average_cost(self):
        """Average cost can never be negative."""
        with pytest.raises(ValidationError):
            Product(id="p1", name="Widget", average_cost=Decimal("-1"))

    def test_product_allows_negative_quantity(self):
        """A backordered product can hold a negative quantity."""
        product = Product(id="p1", quantity=Decimal("-3"))
        assert product.quantity == Decimal("-3")

    def test_transaction_is_frozen(self):
        """Transactions cannot be edited after creation."""
        transaction = make_books().transactions[0]
        with pytest.raises(ValidationError):
            transaction.quantity = Decimal("1")

    def test_ledger_entry_is_frozen(self):
        """Ledger entries cannot be edited after creation."""
        entry = make_books().ledger[0]
        with pytest.raises(ValidationError):
            entry.debit = Decimal("0")

    def test_ledger_entry_rejects_negative_amounts(self):
        """Debit and credit are non-negative."""
        with pytest.raises(ValidationError):
            LedgerEntry(
                id="e1", transaction_id="t1", date=NOW,
                account=CASH_BANK, debit=Decimal("-5"),
            )

    def test_ledger_entry_requires_account(self):
        """An entry must name its account."""
        with pytest.raises(ValidationError):
            LedgerEntry(id="e1", transaction_id="t1", date=NOW, account="  ")

    def test_ledger_entry_side(self):
        """The side follows whichever amount is non-zero."""
        books = make_books()
        assert books.ledger[0].side == LedgerSide.DEBIT
        assert books.ledger[1].side == LedgerSide.CREDIT

    def test_find_product(self):
        """Products can be found by id and by SKU."""
        books = make_books()
        assert books.find_product("p1").name == "Widget"
        assert books.find_product_by_sku("W-1").id == "p1"
        assert books.find_product("missing") is None
        assert books.find_product_by_sku("missing") is None

    def test_empty_books(self):
        """A new business starts with nothing recorded."""
        books = empty_books()
        assert books.products == []
        assert books.transactions == []
        assert books.ledger == []
        assert books.user_profile.business_name == ""


class TestSnapshotShape:
    """Tests for the camelCase JSON snapshot."""

    def test_snapshot_uses_camel_case_keys(self):
        """Snapshot keys match the persisted format."""
        snapshot = make_books().to_snapshot_dict()

        assert set(snapshot) == {"userProfile", "products", "transactions", "ledger"}
        assert "businessName" in snapshot["userProfile"]
        assert "averageCost" in snapshot["products"][0]
        assert "sellingPrice" in snapshot["products"][0]
        assert "productId" in snapshot["transactions"][0]
        assert "totalAmount" in snapshot["transactions"][0]
        assert "transactionId" in snapshot["ledger"][0]

    def test_decimals_serialize_as_strings(self):
        """Money keeps its exact value in JSON."""
        snapshot = make_books().to_snapshot_dict()
        assert snapshot["products"][0]["averageCost"] == "3.00"

    def test_snapshot_parses_back(self):
        """A snapshot dict validates back into equal books."""
        books = make_books()
        assert ERPData.model_validate(books.to_snapshot_dict()) == books

    def test_snake_case_names_are_accepted(self):
        """Python code can use field names instead of aliases."""
        product = Product.model_validate({"id": "p1", "average_cost": "2.5"})
        assert product.average_cost == Decimal("2.5")

    def test_missing_profile_gets_default(self):
        """Older snapshots without a profile still parse."""
        books = ERPData.model_validate({"products": [], "transactions": [], "ledger": []})
        assert books.user_profile == UserProfile()


class TestChartOfAccounts:
    """Tests for account classification."""

    def test_predefined_accounts_are_classified(self):
        """Every standard label has a category."""
        for account in PREDEFINED_ACCOUNTS:
            assert classify_account(account) is not None

    def test_posting_accounts(self):
        """The accounts the engine posts to land in the right categories."""
        assert classify_account(CASH_BANK) == AccountCategory.ASSET
        assert classify_account(INVENTORY) == AccountCategory.ASSET
        assert classify_account(SALES_REVENUE) == AccountCategory.REVENUE
        assert classify_account(COST_OF_GOODS_SOLD) == AccountCategory.EXPENSE
        assert classify_account(CAPITAL_EQUITY) == AccountCategory.EQUITY

    def test_free_text_accounts_by_keyword(self):
        """Free-text labels are classified by keyword."""
        assert classify_account("Shop Rent") == AccountCategory.EXPENSE
        assert classify_account("Bank Loan") == AccountCategory.LIABILITY
        assert classify_account("Interest Income") == AccountCategory.REVENUE
        assert classify_account("Owner Drawings") == AccountCategory.EQUITY
        assert classify_account("Office Equipment") == AccountCategory.ASSET

    @pytest.mark.parametrize("account,expected", [
        ("Current Assets", AccountCategory.ASSET),
        ("Prepaid Rent", AccountCategory.ASSET),
        ("Accrued Salaries Payable", AccountCategory.LIABILITY),
        ("Unearned Revenue", AccountCategory.LIABILITY),
        ("Income Tax Payable", AccountCategory.LIABILITY),
        ("Rent Expense", AccountCategory.EXPENSE),
        ("Parental Leave", None),
    ])
    def test_keywords_match_whole_words(self, account, expected):
        """Keywords are matched at word starts, balance-sheet words first."""
        assert classify_account(account) == expected

    def test_unknown_account_is_unclassified(self):
        """No hint means no category, never a guessed one."""
        assert classify_account("Miscellaneous") is None
        assert classify_account("") is None


class TestPostingResult:
    """Tests for engine result values."""

    def test_failure_builder(self):
        """failure() carries the kind, message and details."""
        result = PostingResult.failure(ErrorKind.UNKNOWN_PRODUCT, "Product not found.", product_id="x")
        assert not result.success
        assert result.error_kind == ErrorKind.UNKNOWN_PRODUCT
        assert result.error.details == {"product_id": "x"}
        assert result.products is None
        assert result.transaction_id is None

    def test_failure_cannot_carry_changes(self):
        """A failed result with entries is rejected."""
        books = make_books()
        with pytest.raises(ValidationError):
            PostingResult(
                success=False,
                error=EngineError(kind=ErrorKind.INVALID_AMOUNT, message="bad"),
                ledger_entries=books.ledger,
            )

    def test_failure_requires_error(self):
        """A failed result must say why."""
        with pytest.raises(ValidationError):
            PostingResult(success=False)

    def test_success_cannot_carry_error(self):
        """A successful result has no error."""
        with pytest.raises(ValidationError):
            PostingResult(
                success=True,
                error=EngineError(kind=ErrorKind.INVALID_INPUT, message="bad"),
            )

    def test_transaction_id_from_entries(self):
        """The grouping id comes from the posted entries."""
        result = PostingResult(success=True, ledger_entries=make_books().ledger)
        assert result.transaction_id == "t1"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            description="Books saved",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None
        assert event.entity_id is None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.PURCHASE_RECORDED,
            entity_type="transaction",
            entity_id="t1",
            correlation_id=correlation_id,
            description="Purchase recorded",
        )
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "purchase_recorded"
        assert log_dict["entity_id"] == "t1"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_builder_sale_recorded(self):
        """Test AuditEventBuilder for a posted sale."""
        correlation_id = uuid4()
        event = AuditEventBuilder.sale_recorded(
            transaction_id="t2",
            product_name="Widget",
            quantity="3",
            total_amount="24.00",
            cost_of_goods_sold="9.00",
            customer="Bob",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.SALE_RECORDED
        assert event.details["cost_of_goods_sold"] == "9.00"
        assert event.is_user_action is True

    def test_audit_event_builder_posting_rejected(self):
        """Test AuditEventBuilder for a refused posting."""
        event = AuditEventBuilder.posting_rejected(
            operation="sale",
            error_kind="insufficient_stock",
            reason="Insufficient stock. Only 2 available.",
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.POSTING_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "insufficient_stock"
        assert event.details["operation"] == "sale"

    def test_snapshot_imported_with_warnings_is_a_warning(self):
        """Imports that raised warnings are flagged."""
        event = AuditEventBuilder.snapshot_imported(
            counts={"products": 1},
            warnings=["Ledger entries for transaction t9 do not balance"],
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING


class TestValidationResult:
    """Tests for SnapshotValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = SnapshotValidationResult(
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="ledger",
                    issue_type="missing",
                    message="Required collection 'ledger' is missing",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors
        assert not result.can_import

    def test_validation_result_warnings_only(self):
        """Test result with only warnings can still be imported."""
        result = SnapshotValidationResult(
            schema_valid=True,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="transactions",
                    issue_type="unknown_product",
                    message="Transactions reference unknown products: p9",
                    severity="warning",
                ),
            ],
            data=make_books(),
        )
        assert not result.has_errors
        assert result.can_import
        assert result.warnings == ["Transactions reference unknown products: p9"]

    def test_issue_severity_is_restricted(self):
        """Only error, warning and info are valid severities."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
