"""
Main Orchestrator for Nexus Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Bookkeeping (event → engine → state store → persist → audit)
2. Analysis (question → read-only projection → AI analyst → answer)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Only the ledger engine decides what gets posted
- Every successful change is persisted as one whole snapshot
- Every posting, refusal, import and export is audited
- The AI analyst only ever sees a copy of the books

A failed save never undoes a posting. The books in memory stay
authoritative and the next successful save catches storage up
("last write wins").
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

import structlog

from nexusledger.agents import ERROR_MESSAGE, AnalysisResponse, FinancialAnalystAgent
from nexusledger.audit import AuditLogger, create_correlation_id
from nexusledger.config import Settings, get_settings
from nexusledger.engine.ledger_engine import Number
from nexusledger.models.accounts import COST_OF_GOODS_SOLD
from nexusledger.models.ledger import ERPData, UserProfile
from nexusledger.models.results import PostingResult, StockPolicy
from nexusledger.models.reports import InventoryRow
from nexusledger.models.validation import SnapshotValidationResult
from nexusledger.reports import LOW_STOCK_THRESHOLD, inventory_valuation
from nexusledger.services.snapshot import (
    SnapshotFormatError,
    export_snapshot,
    validate_snapshot,
)
from nexusledger.services.storage import (
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
    SnapshotStorageInterface,
    StorageError,
)
from nexusledger.store import StateStore
from nexusledger.validation import SnapshotValidator


DEFAULT_STORAGE_KEY = "nexus_erp_data"

logger = structlog.get_logger(__name__)


def _counts(data: ERPData) -> dict[str, int]:
    return {
        "products": len(data.products),
        "transactions": len(data.transactions),
        "ledger_entries": len(data.ledger),
    }


class BookkeepingFlow:
    """
    Orchestrates every change to the books.

    Flow for a business event:
    1. Engine → computes the posting from the current snapshot
    2. Store → swaps in the merged snapshot (only on success)
    3. Persist → saves the whole snapshot under one key
    4. Audit → records the posting, or why it was refused

    Refusals are returned as PostingResult values, never raised.
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        snapshot_storage: Optional[SnapshotStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        validator: Optional[SnapshotValidator] = None,
        max_import_bytes: Optional[int] = None,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    ):
        self._store = store or StateStore()
        self._snapshot_storage = snapshot_storage
        self._audit_logger = audit_logger or AuditLogger()
        self._storage_key = storage_key
        self._validator = validator or SnapshotValidator()
        self._max_import_bytes = max_import_bytes
        self._low_stock_threshold = low_stock_threshold

        # Message of the most recent failed save, cleared by the next good one
        self.last_save_error: Optional[str] = None

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def data(self) -> ERPData:
        return self._store.snapshot

    @property
    def needs_onboarding(self) -> bool:
        """True until the owner's name and business name are on file."""
        profile = self.data.user_profile
        return not (profile and profile.name.strip() and profile.business_name.strip())

    def inventory(self) -> list[InventoryRow]:
        """Inventory rows with the configured low-stock threshold."""
        return inventory_valuation(self.data.products, self._low_stock_threshold)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def load(self, correlation_id: Optional[UUID] = None) -> bool:
        """
        Restore the persisted books, if any.

        Returns:
            True if a snapshot was found and loaded, False when starting fresh

        Raises:
            StorageError: If the stored snapshot cannot be read
            SnapshotFormatError: If it is not a valid books snapshot
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._snapshot_storage is None:
            await self._audit_logger.log_snapshot_loaded(
                key=self._storage_key,
                found=False,
                counts=_counts(self.data),
                correlation_id=correlation_id,
            )
            return False

        try:
            document = await self._snapshot_storage.load_snapshot(self._storage_key)
        except StorageError as e:
            await self._audit_logger.log_error(
                error_type="snapshot_unreadable",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        if document is None:
            await self._audit_logger.log_snapshot_loaded(
                key=self._storage_key,
                found=False,
                counts=_counts(self.data),
                correlation_id=correlation_id,
            )
            return False

        result = self._validator.validate(document)
        if not result.can_import:
            errors = [i for i in result.issues if i.severity == "error"]
            await self._audit_logger.log_error(
                error_type="snapshot_invalid",
                error_message="Stored snapshot failed validation",
                details={"issues": [i.message for i in errors]},
                correlation_id=correlation_id,
            )
            raise SnapshotFormatError("Invalid file format.", issues=errors)

        self._store.replace(result.data)
        await self._audit_logger.log_snapshot_loaded(
            key=self._storage_key,
            found=True,
            counts=_counts(result.data),
            correlation_id=correlation_id,
        )
        return True

    async def _persist(self, correlation_id: UUID) -> bool:
        """Save the current snapshot. Failures are audited, not raised."""
        if self._snapshot_storage is None:
            return True

        data = self.data
        try:
            await self._snapshot_storage.save_snapshot(
                self._storage_key,
                data.to_snapshot_dict(),
            )
        except StorageError as e:
            self.last_save_error = str(e)
            await self._audit_logger.log_save_failed(
                key=self._storage_key,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return False

        self.last_save_error = None
        await self._audit_logger.log_snapshot_saved(
            key=self._storage_key,
            counts=_counts(data),
            correlation_id=correlation_id,
        )
        return True

    async def _rejected(
        self,
        operation: str,
        result: PostingResult,
        correlation_id: UUID,
    ) -> PostingResult:
        await self._audit_logger.log_posting_rejected(
            operation=operation,
            error_kind=result.error.kind.value,
            reason=result.error.message,
            correlation_id=correlation_id,
            details={k: str(v) for k, v in result.error.details.items()},
        )
        return result

    # -------------------------------------------------------------------------
    # Business events
    # -------------------------------------------------------------------------

    async def record_purchase(
        self,
        product_name: str,
        sku: str,
        quantity: Number,
        unit_cost: Number,
        supplier: str,
        correlation_id: Optional[UUID] = None,
    ) -> PostingResult:
        """Buy stock for cash. Restocks the SKU or creates the product."""
        correlation_id = correlation_id or create_correlation_id()

        result = self._store.record_purchase(product_name, sku, quantity, unit_cost, supplier)
        if not result.success:
            return await self._rejected("purchase", result, correlation_id)

        t = result.transaction
        await self._audit_logger.log_purchase_recorded(
            transaction_id=t.id,
            product_name=t.product_name,
            quantity=str(t.quantity),
            total_amount=str(t.total_amount),
            supplier=t.party,
            correlation_id=correlation_id,
        )
        await self._persist(correlation_id)
        return result

    async def record_sale(
        self,
        product_id: str,
        quantity: Number,
        unit_price: Number,
        customer: str,
        correlation_id: Optional[UUID] = None,
    ) -> PostingResult:
        """Sell stock for cash, recognising revenue and cost of goods sold."""
        correlation_id = correlation_id or create_correlation_id()

        result = self._store.record_sale(product_id, quantity, unit_price, customer)
        if not result.success:
            return await self._rejected("sale", result, correlation_id)

        t = result.transaction
        cogs = sum(
            (e.debit for e in result.ledger_entries if e.account == COST_OF_GOODS_SOLD),
            Decimal("0"),
        )
        await self._audit_logger.log_sale_recorded(
            transaction_id=t.id,
            product_name=t.product_name,
            quantity=str(t.quantity),
            total_amount=str(t.total_amount),
            cost_of_goods_sold=str(cogs),
            customer=t.party,
            correlation_id=correlation_id,
        )
        await self._persist(correlation_id)
        return result

    async def record_manual_entry(
        self,
        debit_account: str,
        credit_account: str,
        amount: Number,
        description: str,
        correlation_id: Optional[UUID] = None,
    ) -> PostingResult:
        """Post a two-line journal entry outside the purchase/sale vocabulary."""
        correlation_id = correlation_id or create_correlation_id()

        result = self._store.record_manual_journal_entry(
            debit_account, credit_account, amount, description,
        )
        if not result.success:
            return await self._rejected("journal_entry", result, correlation_id)

        debit_entry = result.ledger_entries[0]
        await self._audit_logger.log_journal_entry_recorded(
            transaction_id=result.transaction_id,
            debit_account=debit_entry.account,
            credit_account=result.ledger_entries[1].account,
            amount=str(debit_entry.debit),
            correlation_id=correlation_id,
        )
        await self._persist(correlation_id)
        return result

    # -------------------------------------------------------------------------
    # Profile, import and export
    # -------------------------------------------------------------------------

    async def update_profile(
        self,
        name: str,
        business_name: str,
        location: str,
        role: Optional[str] = None,
        industry: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> UserProfile:
        correlation_id = correlation_id or create_correlation_id()

        profile = self._store.update_profile(name, business_name, location, role, industry)
        await self._audit_logger.log_profile_updated(
            business_name=profile.business_name,
            correlation_id=correlation_id,
        )
        await self._persist(correlation_id)
        return profile

    async def import_data(
        self,
        raw: Union[str, bytes],
        correlation_id: Optional[UUID] = None,
    ) -> SnapshotValidationResult:
        """
        Replace the books with an uploaded backup.

        All-or-nothing: the current books are untouched unless the whole
        file parses and passes the schema stage.

        Returns:
            The validation result; its `warnings` list semantic oddities
            that did not block the import

        Raises:
            SnapshotFormatError: If the file cannot be imported
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            result = validate_snapshot(
                raw,
                validator=self._validator,
                max_bytes=self._max_import_bytes,
            )
        except SnapshotFormatError as e:
            await self._audit_logger.log_import_rejected(
                reason=e.message,
                issues=[issue.model_dump() for issue in e.issues],
                correlation_id=correlation_id,
            )
            raise

        self._store.replace(result.data)
        await self._audit_logger.log_snapshot_imported(
            counts=_counts(result.data),
            warnings=result.warnings,
            correlation_id=correlation_id,
        )
        await self._persist(correlation_id)
        return result

    async def export_data(
        self,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, str]:
        """
        Serialize the current books for download.

        Returns:
            (filename, json_text)
        """
        correlation_id = correlation_id or create_correlation_id()

        data = self.data
        filename, text = export_snapshot(data, today)
        await self._audit_logger.log_snapshot_exported(
            filename=filename,
            counts=_counts(data),
            correlation_id=correlation_id,
        )
        return filename, text


class AnalystFlow:
    """
    Orchestrates questions to the AI analyst.

    CRITICAL BOUNDARIES:
    1. The analyst receives the snapshot current at call time
    2. Its answer is display-only and never parsed
    3. Nothing it returns can reach the books
    """

    def __init__(
        self,
        agent: Optional[FinancialAnalystAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._agent = agent
        self._audit_logger = audit_logger or AuditLogger()

    def _agent_for(self, api_key: Optional[str]) -> FinancialAnalystAgent:
        # A key typed into Settings wins over the configured one
        if api_key:
            return FinancialAnalystAgent(api_key=api_key)
        if self._agent is None:
            self._agent = FinancialAnalystAgent()
        return self._agent

    async def ask(
        self,
        data: ERPData,
        question: str,
        api_key: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AnalysisResponse:
        correlation_id = correlation_id or create_correlation_id()

        await self._audit_logger.log_analysis_requested(
            query=question,
            correlation_id=correlation_id,
        )

        response = await self._agent_for(api_key).analyze(data, question)

        if response.text == ERROR_MESSAGE:
            await self._audit_logger.log_external_service_error(
                service="gemini",
                error_message="Analysis request failed",
                correlation_id=correlation_id,
            )
        await self._audit_logger.log_analysis_completed(
            success=response.success,
            response_length=len(response.text),
            correlation_id=correlation_id,
        )
        return response


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
) -> tuple[BookkeepingFlow, AnalystFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the local data directory.
                    Set to False for testing without storage.
        settings: Settings to use instead of the cached environment ones

    Returns:
        (bookkeeping_flow, analyst_flow)
    """
    settings = settings or get_settings()
    ledger_settings = settings.ledger
    storage_settings = settings.storage

    store = StateStore(
        stock_policy=StockPolicy(ledger_settings.stock_policy),
        default_markup=ledger_settings.default_markup,
    )

    snapshot_storage = None
    if use_storage:
        snapshot_storage = JsonFileSnapshotStorage(storage_settings.data_dir)
        audit_logger = AuditLogger(JsonLinesAuditStorage(storage_settings.audit_log_path))
    else:
        audit_logger = AuditLogger()  # Local-only logging

    bookkeeping_flow = BookkeepingFlow(
        store=store,
        snapshot_storage=snapshot_storage,
        audit_logger=audit_logger,
        storage_key=storage_settings.snapshot_key,
        max_import_bytes=settings.app.max_import_size_bytes,
        low_stock_threshold=ledger_settings.low_stock_threshold,
    )

    analyst_flow = AnalystFlow(audit_logger=audit_logger)

    logger.info(
        "app_components_created",
        use_storage=use_storage,
        stock_policy=ledger_settings.stock_policy,
    )
    return bookkeeping_flow, analyst_flow
