"""
State Store

The single source of truth for the books: one ERPData value.

DESIGN DECISION: The store never edits its snapshot in place.
Every change builds the next ERPData and swaps it in whole, so any
snapshot handed out earlier stays exactly as it was. The ledger engine
is called with the current collections and its result is merged here.

Listeners are told about every successful replacement. That is how
persistence and UI refresh hang off the store without it knowing
about either.
"""

from decimal import Decimal
from typing import Callable, Optional

import structlog

from nexusledger.engine import (
    DEFAULT_MARKUP,
    generate_id,
    record_manual_journal_entry,
    record_purchase,
    record_sale,
    utc_now,
)
from nexusledger.engine.ledger_engine import Clock, IdFactory, Number
from nexusledger.models.ledger import ERPData, UserProfile, empty_books
from nexusledger.models.results import PostingResult, StockPolicy


ChangeListener = Callable[[ERPData], None]

logger = structlog.get_logger(__name__)


def merge_posting(data: ERPData, result: PostingResult) -> ERPData:
    """
    Build the next snapshot from a successful engine result.

    Products are replaced when the result carries them; the transaction
    and ledger entries are appended.
    """
    if not result.success:
        raise ValueError("Cannot merge a failed posting")

    transactions = list(data.transactions)
    if result.transaction is not None:
        transactions.append(result.transaction)

    return data.model_copy(update={
        "products": list(result.products) if result.products is not None else list(data.products),
        "transactions": transactions,
        "ledger": [*data.ledger, *result.ledger_entries],
    })


class StateStore:
    """
    Owns the current ERPData and applies engine results to it.

    Usage:
        store = StateStore()
        result = store.record_purchase("Widget", "W-1", 10, "2.00", "Acme")
        if not result.success:
            show(result.error.message)
    """

    def __init__(
        self,
        data: Optional[ERPData] = None,
        *,
        stock_policy: StockPolicy = StockPolicy.BLOCK,
        default_markup: Decimal = DEFAULT_MARKUP,
        id_factory: IdFactory = generate_id,
        now: Clock = utc_now,
    ):
        self._data = data if data is not None else empty_books()
        self._stock_policy = stock_policy
        self._default_markup = default_markup
        self._id_factory = id_factory
        self._now = now
        self._listeners: list[ChangeListener] = []

    @property
    def snapshot(self) -> ERPData:
        """The current books. Never mutated by the store."""
        return self._data

    @property
    def stock_policy(self) -> StockPolicy:
        return self._stock_policy

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, data: ERPData) -> None:
        self._data = data
        for listener in list(self._listeners):
            listener(data)

    def _apply(self, result: PostingResult) -> PostingResult:
        if result.success:
            self._set(merge_posting(self._data, result))
        else:
            logger.info(
                "posting_rejected",
                error_kind=result.error.kind.value,
                reason=result.error.message,
            )
        return result

    # -------------------------------------------------------------------------
    # Business events
    # -------------------------------------------------------------------------

    def record_purchase(
        self,
        product_name: str,
        sku: str,
        quantity: Number,
        unit_cost: Number,
        supplier: str,
    ) -> PostingResult:
        return self._apply(record_purchase(
            product_name,
            sku,
            quantity,
            unit_cost,
            supplier,
            self._data.products,
            default_markup=self._default_markup,
            id_factory=self._id_factory,
            now=self._now,
        ))

    def record_sale(
        self,
        product_id: str,
        quantity: Number,
        unit_price: Number,
        customer: str,
    ) -> PostingResult:
        return self._apply(record_sale(
            product_id,
            quantity,
            unit_price,
            customer,
            self._data.products,
            stock_policy=self._stock_policy,
            id_factory=self._id_factory,
            now=self._now,
        ))

    def record_manual_journal_entry(
        self,
        debit_account: str,
        credit_account: str,
        amount: Number,
        description: str,
    ) -> PostingResult:
        return self._apply(record_manual_journal_entry(
            debit_account,
            credit_account,
            amount,
            description,
            id_factory=self._id_factory,
            now=self._now,
        ))

    # -------------------------------------------------------------------------
    # Wholesale changes
    # -------------------------------------------------------------------------

    def update_profile(
        self,
        name: str,
        business_name: str,
        location: str,
        role: Optional[str] = None,
        industry: Optional[str] = None,
    ) -> UserProfile:
        """Replace profile fields; blank role/industry keep the old values."""
        current = self._data.user_profile or UserProfile()
        profile = UserProfile(
            name=name,
            business_name=business_name,
            location=location,
            role=role or current.role,
            industry=industry or current.industry,
        )
        self._set(self._data.model_copy(update={"user_profile": profile}))
        return profile

    def replace(self, data: ERPData) -> None:
        """Swap in a whole new snapshot (import, restore)."""
        self._set(data)
