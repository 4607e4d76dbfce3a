"""Tests for the state store."""

import itertools
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from nexusledger.models.ledger import UserProfile, empty_books
from nexusledger.models.results import ErrorKind, PostingResult, StockPolicy
from nexusledger.store import StateStore, merge_posting


NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_store(**kwargs) -> StateStore:
    numbers = itertools.count(1)
    return StateStore(id_factory=lambda: f"id-{next(numbers)}", now=lambda: NOW, **kwargs)


class TestStateStore:
    """Tests for applying engine results to the books."""

    def test_starts_with_empty_books(self):
        """A new store holds the initial empty data."""
        store = make_store()
        assert store.snapshot == empty_books()
        assert store.stock_policy == StockPolicy.BLOCK

    def test_purchase_replaces_snapshot(self):
        """A successful posting swaps in a new snapshot."""
        store = make_store()
        before = store.snapshot

        result = store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")

        assert result.success
        after = store.snapshot
        assert after is not before
        assert len(after.products) == 1
        assert len(after.transactions) == 1
        assert len(after.ledger) == 2
        # The earlier snapshot is untouched
        assert before.products == []
        assert before.ledger == []

    def test_failed_posting_keeps_snapshot(self):
        """A refused event leaves the books exactly as they were."""
        store = make_store()
        store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")
        before = store.snapshot

        result = store.record_sale("missing", 1, "5.00", "Bob")

        assert result.error_kind == ErrorKind.UNKNOWN_PRODUCT
        assert store.snapshot is before

    def test_manual_entry_only_touches_ledger(self):
        """Journal entries add ledger lines but no transactions."""
        store = make_store()
        store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")
        products = store.snapshot.products

        store.record_manual_journal_entry("Operating Expenses", "Cash / Bank", "50", "Rent")

        assert store.snapshot.products == products
        assert len(store.snapshot.transactions) == 1
        assert len(store.snapshot.ledger) == 4

    def test_backorder_policy_is_passed_to_engine(self):
        """The configured stock policy governs sales."""
        store = make_store(stock_policy=StockPolicy.ALLOW_BACKORDER)
        store.record_purchase("Widget", "W-1", 1, "2.00", "Acme")
        product_id = store.snapshot.products[0].id

        result = store.record_sale(product_id, 3, "5.00", "Bob")

        assert result.success
        assert store.snapshot.products[0].quantity == Decimal("-2")

    def test_default_markup_is_passed_to_engine(self):
        """New products are priced with the configured markup."""
        store = make_store(default_markup=Decimal("2"))
        store.record_purchase("Widget", "W-1", 1, "2.00", "Acme")
        assert store.snapshot.products[0].selling_price == Decimal("4.00")


class TestListeners:
    """Tests for change notification."""

    def test_listener_receives_new_snapshot(self):
        """Listeners are called with the replacement snapshot."""
        store = make_store()
        seen = []
        store.subscribe(seen.append)

        store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")

        assert seen == [store.snapshot]

    def test_listener_not_called_on_failure(self):
        """Refused events do not notify."""
        store = make_store()
        seen = []
        store.subscribe(seen.append)

        store.record_purchase("Widget", "W-1", 0, "2.00", "Acme")

        assert seen == []

    def test_unsubscribe(self):
        """An unsubscribed listener hears nothing more."""
        store = make_store()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")

        assert seen == []

    def test_replace_notifies(self):
        """Wholesale replacement is a change too."""
        store = make_store()
        seen = []
        store.subscribe(seen.append)
        replacement = empty_books()

        store.replace(replacement)

        assert store.snapshot is replacement
        assert seen == [replacement]


class TestProfile:
    """Tests for profile updates."""

    def test_update_profile(self):
        """Profile fields are replaced."""
        store = make_store()
        profile = store.update_profile("Ana", "Ana's Shop", "Porto")

        assert store.snapshot.user_profile == profile
        assert profile.business_name == "Ana's Shop"

    def test_blank_role_keeps_previous(self):
        """Role and industry are only replaced when given."""
        books = empty_books().model_copy(update={
            "user_profile": UserProfile(name="Ana", role="Owner", industry="Retail"),
        })
        store = make_store(data=books)

        profile = store.update_profile("Ana", "Shop", "Porto")

        assert profile.role == "Owner"
        assert profile.industry == "Retail"


class TestMergePosting:
    """Tests for merging a posting into a snapshot."""

    def test_merge_rejects_failure(self):
        """Only successful postings can be merged."""
        failure = PostingResult.failure(ErrorKind.INVALID_AMOUNT, "bad")
        with pytest.raises(ValueError):
            merge_posting(empty_books(), failure)

    def test_merge_appends(self):
        """Transactions and entries are appended, products replaced."""
        store = make_store()
        result = store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")

        merged = merge_posting(store.snapshot, result)

        assert len(merged.transactions) == 2
        assert len(merged.ledger) == 4
        assert merged.products == result.products


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
