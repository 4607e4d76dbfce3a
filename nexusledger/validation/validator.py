"""
Two-Stage Snapshot Validation

DESIGN DECISION: An imported snapshot is checked in two distinct stages
before it is allowed anywhere near the live books:

STAGE 1 - SCHEMA VALIDATION:
- The document is a JSON object
- `products`, `transactions` and `ledger` are present and are lists
- Every record parses into the data model
- Any failure here rejects the whole import

STAGE 2 - SEMANTIC VALIDATION:
- Every transaction group in the ledger balances
- Transaction totals equal quantity * unit price
- Ids are unique, transactions reference known products
- Findings here are warnings only

The import is all-or-nothing: either the complete parsed snapshot is
returned, or nothing is.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from collections import Counter
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from nexusledger.models.ledger import ERPData
from nexusledger.models.validation import SnapshotValidationResult, ValidationIssue
from nexusledger.reports import unbalanced_groups


REQUIRED_KEYS = ("products", "transactions", "ledger")

# Snapshots written by older builds stored amounts as binary floats
TOTAL_TOLERANCE = Decimal("0.005")

# Don't flood the user with one message per broken record
MAX_RECORD_ISSUES = 10


class SnapshotValidator:
    """
    Validates a parsed JSON document as a books snapshot.

    Stage 1: Schema validation (blocks the import)
    Stage 2: Semantic validation (warnings only)
    """

    def _validate_schema(
        self,
        document: Any,
    ) -> tuple[Optional[ERPData], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_data_or_None, list_of_issues)
        """
        issues = []

        if not isinstance(document, dict):
            issues.append(ValidationIssue(
                field="document",
                issue_type="invalid_format",
                message="Snapshot must be a JSON object",
                severity="error",
            ))
            return None, issues

        for key in REQUIRED_KEYS:
            if key not in document or document[key] is None:
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="missing",
                    message=f"Required collection '{key}' is missing",
                    severity="error",
                ))
            elif not isinstance(document[key], list):
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="invalid_format",
                    message=f"'{key}' must be a list",
                    severity="error",
                ))

        if issues:
            return None, issues

        try:
            data = ERPData.model_validate(document)
        except ValidationError as e:
            for error in e.errors()[:MAX_RECORD_ISSUES]:
                location = ".".join(str(part) for part in error["loc"])
                issues.append(ValidationIssue(
                    field=location or "document",
                    issue_type="invalid_record",
                    message=f"{location}: {error['msg']}",
                    severity="error",
                ))
            return None, issues

        return data, issues

    def _validate_semantic(
        self,
        data: ERPData,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_clean, list_of_issues)
        """
        issues = []

        for transaction_id, difference in unbalanced_groups(data.ledger).items():
            issues.append(ValidationIssue(
                field="ledger",
                issue_type="unbalanced",
                message=(
                    f"Ledger entries for transaction {transaction_id} do not balance "
                    f"(debits exceed credits by {difference})"
                ),
                severity="warning",
            ))

        for t in data.transactions:
            expected = t.quantity * t.unit_price
            if abs(t.total_amount - expected) > TOTAL_TOLERANCE:
                issues.append(ValidationIssue(
                    field="transactions",
                    issue_type="inconsistent_total",
                    message=(
                        f"Transaction {t.id} total {t.total_amount} does not equal "
                        f"quantity x unit price ({expected})"
                    ),
                    severity="warning",
                ))

        collections = {
            "products": [p.id for p in data.products],
            "transactions": [t.id for t in data.transactions],
            "ledger": [e.id for e in data.ledger],
        }
        for name, ids in collections.items():
            duplicates = sorted(i for i, count in Counter(ids).items() if count > 1)
            if duplicates:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="duplicate_id",
                    message=f"Duplicate ids in {name}: {', '.join(duplicates)}",
                    severity="warning",
                ))

        skus = Counter(p.sku for p in data.products if p.sku)
        duplicate_skus = sorted(sku for sku, count in skus.items() if count > 1)
        if duplicate_skus:
            issues.append(ValidationIssue(
                field="products",
                issue_type="duplicate_sku",
                message=f"More than one product uses SKU: {', '.join(duplicate_skus)}",
                severity="warning",
            ))

        known_products = set(collections["products"])
        orphans = sorted({t.product_id for t in data.transactions} - known_products)
        if orphans:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="unknown_product",
                message=f"Transactions reference unknown products: {', '.join(orphans)}",
                severity="warning",
            ))

        return not issues, issues

    def validate(self, document: Any) -> SnapshotValidationResult:
        """
        Run the full two-stage validation pipeline.

        Stage 2 only runs when stage 1 produced a parsed snapshot.
        """
        data, issues = self._validate_schema(document)
        schema_valid = data is not None

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(data)
            issues.extend(semantic_issues)

        return SnapshotValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=issues,
            data=data,
        )

    def get_user_friendly_summary(
        self,
        result: SnapshotValidationResult,
    ) -> str:
        """Summary of validation results for the settings page."""
        if result.can_import and not result.warnings:
            return "✅ Snapshot looks good."

        lines = []

        if not result.schema_valid:
            lines.append("❌ This file cannot be imported:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Imported, but please check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
