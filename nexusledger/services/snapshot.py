"""
Snapshot Import / Export

DESIGN DECISION: Backups are the exact shape of the persisted snapshot:
    { userProfile, products[], transactions[], ledger[] }

Export is a pure function of the books and a date. Import is
all-or-nothing: the raw bytes are parsed and fully validated before a
single record is handed back. If anything in the schema stage fails,
the caller gets a SnapshotFormatError and the live books stay as they
were.
"""

import json
from datetime import date
from typing import Optional, Union

from nexusledger.models.ledger import ERPData
from nexusledger.models.validation import SnapshotValidationResult, ValidationIssue
from nexusledger.validation import SnapshotValidator


EXPORT_FILENAME_TEMPLATE = "business_manager_backup_{day}.json"

PARSE_ERROR_MESSAGE = "Could not parse JSON."
INVALID_FORMAT_MESSAGE = "Invalid file format."
TOO_LARGE_MESSAGE = "File is too large to import."


class SnapshotFormatError(Exception):
    """
    Raised when a file cannot be imported as a books snapshot.

    `issues` carries the schema-stage findings, when there are any.
    """

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.message = message
        self.issues = issues or []


def export_filename(today: Optional[date] = None) -> str:
    day = today or date.today()
    return EXPORT_FILENAME_TEMPLATE.format(day=day.isoformat())


def export_snapshot(data: ERPData, today: Optional[date] = None) -> tuple[str, str]:
    """
    Serialize the books for download.

    Returns:
        (filename, json_text) with two-space indentation and the
        camelCase snapshot keys
    """
    text = json.dumps(data.to_snapshot_dict(), indent=2, ensure_ascii=False)
    return export_filename(today), text


def validate_snapshot(
    raw: Union[str, bytes],
    validator: Optional[SnapshotValidator] = None,
    max_bytes: Optional[int] = None,
) -> SnapshotValidationResult:
    """
    Parse and validate an uploaded file.

    Returns the full validation result, including semantic warnings,
    only when the file is importable.

    Raises:
        SnapshotFormatError: If the file is too large, is not JSON, or
            fails the schema stage
    """
    if max_bytes is not None and len(raw) > max_bytes:
        raise SnapshotFormatError(TOO_LARGE_MESSAGE)

    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SnapshotFormatError(PARSE_ERROR_MESSAGE) from e

    result = (validator or SnapshotValidator()).validate(document)
    if not result.can_import:
        errors = [issue for issue in result.issues if issue.severity == "error"]
        raise SnapshotFormatError(INVALID_FORMAT_MESSAGE, issues=errors)

    return result


def import_snapshot(
    raw: Union[str, bytes],
    validator: Optional[SnapshotValidator] = None,
    max_bytes: Optional[int] = None,
) -> ERPData:
    """
    Parse an uploaded backup into books that can replace the current ones.

    Raises:
        SnapshotFormatError: "Could not parse JSON." or "Invalid file format."
    """
    return validate_snapshot(raw, validator=validator, max_bytes=max_bytes).data
