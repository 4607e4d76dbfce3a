"""
Validation Models

Results of checking an imported snapshot before it replaces the books.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from nexusledger.models.ledger import ERPData


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Collection or field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_record', 'unbalanced')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class SnapshotValidationResult(BaseModel):
    """
    Result of the two-stage snapshot validation.

    Stage 1: Schema validation (required keys, every record well-formed)
    Stage 2: Semantic validation (balance, totals, references)

    Only stage 1 errors block an import. Stage 2 findings are warnings:
    the books being imported are the user's own, and we report oddities
    rather than silently fixing or refusing them.
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    # Parsed books, present only when the schema stage passed
    data: Optional[ERPData] = None

    @property
    def can_import(self) -> bool:
        return self.schema_valid and self.data is not None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
