"""
Audit Logger

DESIGN DECISION: Every change to the books is logged.
This provides:
1. A trail of every posting and every refused posting
2. Debugging capability when a save or an import goes wrong
3. A record of wholesale replacements by import

The audit logger:
- Is async so it sits naturally inside the async flows
- Gracefully handles storage failures (a broken audit file never blocks a sale)
- Supports correlation IDs to tie a posting to the save it triggered
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from nexusledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from nexusledger.services.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (JSON lines file by default)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Where events are appended (the JSON lines audit file
                    in the app). Without one, events only reach structlog.
        """
        self._storage = storage
        self._logger = structlog.get_logger("nexusledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Emit the event to structlog at its severity, then append it to
        storage when one is configured.

        Returns False only when the storage append failed.
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StorageError as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_purchase_recorded(
        self,
        transaction_id: str,
        product_name: str,
        quantity: str,
        total_amount: str,
        supplier: str,
        correlation_id: UUID,
    ) -> None:
        """Log a posted purchase."""
        event = AuditEventBuilder.purchase_recorded(
            transaction_id=transaction_id,
            product_name=product_name,
            quantity=quantity,
            total_amount=total_amount,
            supplier=supplier,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_sale_recorded(
        self,
        transaction_id: str,
        product_name: str,
        quantity: str,
        total_amount: str,
        cost_of_goods_sold: str,
        customer: str,
        correlation_id: UUID,
    ) -> None:
        """Log a posted sale."""
        event = AuditEventBuilder.sale_recorded(
            transaction_id=transaction_id,
            product_name=product_name,
            quantity=quantity,
            total_amount=total_amount,
            cost_of_goods_sold=cost_of_goods_sold,
            customer=customer,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_journal_entry_recorded(
        self,
        transaction_id: str,
        debit_account: str,
        credit_account: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        """Log a manual journal entry."""
        event = AuditEventBuilder.journal_entry_recorded(
            transaction_id=transaction_id,
            debit_account=debit_account,
            credit_account=credit_account,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_posting_rejected(
        self,
        operation: str,
        error_kind: str,
        reason: str,
        correlation_id: UUID,
        details: Optional[dict] = None,
    ) -> None:
        """Log a posting the engine refused."""
        event = AuditEventBuilder.posting_rejected(
            operation=operation,
            error_kind=error_kind,
            reason=reason,
            correlation_id=correlation_id,
            details=details,
        )
        await self.log(event)

    async def log_snapshot_loaded(
        self,
        key: str,
        found: bool,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        """Log the startup restore."""
        event = AuditEventBuilder.snapshot_loaded(
            key=key,
            found=found,
            counts=counts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_saved(
        self,
        key: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.snapshot_saved(
            key=key,
            counts=counts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        key: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            key=key,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_exported(
        self,
        filename: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.snapshot_exported(
            filename=filename,
            counts=counts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_imported(
        self,
        counts: dict[str, int],
        warnings: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a successful import that replaced the books."""
        event = AuditEventBuilder.snapshot_imported(
            counts=counts,
            warnings=warnings,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_import_rejected(
        self,
        reason: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log an import that left the books untouched."""
        event = AuditEventBuilder.import_rejected(
            reason=reason,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_profile_updated(
        self,
        business_name: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.profile_updated(
            business_name=business_name,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_analysis_requested(
        self,
        query: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.analysis_requested(
            query=query,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_analysis_completed(
        self,
        success: bool,
        response_length: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.analysis_completed(
            success=success,
            response_length=response_length,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log external service error."""
        event = AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., recording a sale).
    Pass it through all subsequent operations.
    """
    return uuid4()
