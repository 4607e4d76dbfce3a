"""Tests for the audit logger."""

import asyncio
from uuid import UUID

import pytest

from nexusledger.audit import AuditLogger, create_correlation_id
from nexusledger.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from nexusledger.services.storage import InMemoryAuditStorage, StorageError


class FailingAuditStorage(InMemoryAuditStorage):
    """Audit storage whose disk is always full."""

    async def append_event(self, event):
        raise StorageError("disk full")


class TestAuditLogger:
    """Tests for logging and persisting audit events."""

    def test_event_is_persisted(self):
        """Events reach the storage backend."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)
        event = AuditEventBuilder.profile_updated("Ana's Shop", create_correlation_id())

        assert asyncio.run(audit.log(event)) is True
        assert storage.events == [event]

    def test_no_storage(self):
        """Without storage the event is only logged locally."""
        audit = AuditLogger()
        event = AuditEventBuilder.profile_updated("Ana's Shop", create_correlation_id())
        assert asyncio.run(audit.log(event)) is True

    def test_storage_failure_does_not_raise(self):
        """A broken audit log never blocks the caller."""
        audit = AuditLogger(FailingAuditStorage())
        event = AuditEventBuilder.profile_updated("Ana's Shop", create_correlation_id())
        assert asyncio.run(audit.log(event)) is False

    def test_correlation_ids_are_unique(self):
        """Each user action gets its own id."""
        first, second = create_correlation_id(), create_correlation_id()
        assert isinstance(first, UUID)
        assert first != second


class TestAuditHelpers:
    """Tests for the typed logging helpers."""

    def test_purchase_recorded(self):
        """Purchases are user actions tied to their transaction."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)
        correlation_id = create_correlation_id()

        asyncio.run(audit.log_purchase_recorded(
            transaction_id="t1",
            product_name="Widget",
            quantity="10",
            total_amount="20.00",
            supplier="Acme",
            correlation_id=correlation_id,
        ))

        event = storage.events[0]
        assert event.event_type == AuditEventType.PURCHASE_RECORDED
        assert event.entity_id == "t1"
        assert event.correlation_id == correlation_id
        assert event.is_user_action
        assert event.details["supplier"] == "Acme"

    def test_posting_rejected(self):
        """Refusals are warnings carrying the error kind."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)

        asyncio.run(audit.log_posting_rejected(
            operation="sale",
            error_kind="INSUFFICIENT_STOCK",
            reason="Insufficient stock. Only 2 available.",
            correlation_id=create_correlation_id(),
            details={"product_id": "p1"},
        ))

        event = storage.events[0]
        assert event.event_type == AuditEventType.POSTING_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "INSUFFICIENT_STOCK"
        assert event.details == {"operation": "sale", "product_id": "p1"}
        assert event.description.startswith("Sale rejected")

    def test_save_failed_is_an_error(self):
        """Save failures are logged at error severity."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)

        asyncio.run(audit.log_save_failed("books", "disk full", create_correlation_id()))

        event = storage.events[0]
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_import_with_warnings(self):
        """Imports with findings are flagged for review."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)

        asyncio.run(audit.log_snapshot_imported(
            counts={"products": 1, "transactions": 0, "ledger_entries": 0},
            warnings=["Duplicate ids in products: p1"],
            correlation_id=create_correlation_id(),
        ))

        event = storage.events[0]
        assert event.severity == AuditSeverity.WARNING
        assert event.details["warnings"] == ["Duplicate ids in products: p1"]

    def test_long_queries_are_truncated(self):
        """Only the start of an analyst question is kept."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)

        asyncio.run(audit.log_analysis_requested("x" * 500, create_correlation_id()))

        assert len(storage.events[0].details["query"]) == 200

    def test_log_dict_is_json_friendly(self):
        """Structured log output uses plain strings."""
        correlation_id = create_correlation_id()
        event = AuditEventBuilder.external_service_error("gemini", "timeout", correlation_id)

        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "external_service_error"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"] == {"service": "gemini"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
