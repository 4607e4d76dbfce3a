"""
Audit Models for Nexus Ledger

Every change to the books is logged for audit purposes.
This provides:
1. Traceability of every posting and every refusal
2. Debugging information when things go wrong
3. A record of imports that replaced the books wholesale

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Postings
    PURCHASE_RECORDED = "purchase_recorded"
    SALE_RECORDED = "sale_recorded"
    JOURNAL_ENTRY_RECORDED = "journal_entry_recorded"
    POSTING_REJECTED = "posting_rejected"

    # Snapshot lifecycle
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"
    IMPORT_REJECTED = "import_rejected"
    SAVE_FAILED = "save_failed"

    # Profile
    PROFILE_UPDATED = "profile_updated"

    # AI analyst
    ANALYSIS_REQUESTED = "analysis_requested"
    ANALYSIS_COMPLETED = "analysis_completed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'snapshot', 'analysis')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a posting and the save it triggered)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.purchase_recorded(transaction_id, ...)
        event = AuditEventBuilder.posting_rejected("sale", "insufficient_stock", ...)
    """

    @staticmethod
    def purchase_recorded(
        transaction_id: str,
        product_name: str,
        quantity: str,
        total_amount: str,
        supplier: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PURCHASE_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Purchase recorded: {quantity} x {product_name} from {supplier}",
            details={
                "product_name": product_name,
                "quantity": quantity,
                "total_amount": total_amount,
                "supplier": supplier,
            },
            is_user_action=True,
        )

    @staticmethod
    def sale_recorded(
        transaction_id: str,
        product_name: str,
        quantity: str,
        total_amount: str,
        cost_of_goods_sold: str,
        customer: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SALE_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Sale recorded: {quantity} x {product_name} to {customer}",
            details={
                "product_name": product_name,
                "quantity": quantity,
                "total_amount": total_amount,
                "cost_of_goods_sold": cost_of_goods_sold,
                "customer": customer,
            },
            is_user_action=True,
        )

    @staticmethod
    def journal_entry_recorded(
        transaction_id: str,
        debit_account: str,
        credit_account: str,
        amount: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.JOURNAL_ENTRY_RECORDED,
            entity_type="journal_entry",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Journal entry: Dr {debit_account} / Cr {credit_account} {amount}",
            details={
                "debit_account": debit_account,
                "credit_account": credit_account,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def posting_rejected(
        operation: str,
        error_kind: str,
        reason: str,
        correlation_id: UUID,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.POSTING_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=operation,
            correlation_id=correlation_id,
            description=f"{operation.capitalize()} rejected: {reason}",
            details={"operation": operation, **(details or {})},
            error_code=error_kind,
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def snapshot_loaded(
        key: str,
        found: bool,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            entity_id=key,
            correlation_id=correlation_id,
            description=(
                "Books restored from storage" if found else "No saved books, starting fresh"
            ),
            details={"found": found, **counts},
        )

    @staticmethod
    def snapshot_saved(
        key: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            entity_id=key,
            correlation_id=correlation_id,
            description="Books saved",
            details=counts,
        )

    @staticmethod
    def save_failed(
        key: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            correlation_id=correlation_id,
            description="Saving the books failed",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_exported(
        filename: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            entity_type="snapshot",
            entity_id=filename,
            correlation_id=correlation_id,
            description=f"Books exported to {filename}",
            details=counts,
            is_user_action=True,
        )

    @staticmethod
    def snapshot_imported(
        counts: dict[str, int],
        warnings: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORTED,
            severity=AuditSeverity.WARNING if warnings else AuditSeverity.INFO,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Books replaced by import ({len(warnings)} warnings)",
            details={**counts, "warnings": warnings},
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(
        reason: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Import rejected: {reason}",
            details={"issues": issues},
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(
        business_name: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Profile updated for {business_name or 'unnamed business'}",
            details={"business_name": business_name},
            is_user_action=True,
        )

    @staticmethod
    def analysis_requested(
        query: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANALYSIS_REQUESTED,
            entity_type="analysis",
            correlation_id=correlation_id,
            description="AI analysis requested",
            details={"query": query[:200]},
            is_user_action=True,
        )

    @staticmethod
    def analysis_completed(
        success: bool,
        response_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANALYSIS_COMPLETED,
            severity=AuditSeverity.INFO if success else AuditSeverity.WARNING,
            entity_type="analysis",
            correlation_id=correlation_id,
            description=(
                "AI analysis completed" if success else "AI analysis returned an error message"
            ),
            details={"success": success, "response_length": response_length},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
