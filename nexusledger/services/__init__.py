"""Services package."""

from nexusledger.services.locale import (
    SUPPORTED_CURRENCIES,
    format_currency,
    get_label,
)
from nexusledger.services.snapshot import (
    SnapshotFormatError,
    export_snapshot,
    import_snapshot,
    validate_snapshot,
)
from nexusledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
    SnapshotStorageInterface,
    StorageError,
)

__all__ = [
    # Locale
    "SUPPORTED_CURRENCIES",
    "format_currency",
    "get_label",
    # Snapshot import/export
    "SnapshotFormatError",
    "export_snapshot",
    "import_snapshot",
    "validate_snapshot",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "JsonLinesAuditStorage",
    "SnapshotStorageInterface",
    "StorageError",
]
