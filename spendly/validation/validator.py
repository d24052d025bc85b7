"""
Input Validation for Ledger Entry Points

DESIGN DECISION: Every mutating entry point validates its raw input
before touching the store. A rejected input raises ValidationError with
every issue found, and the store is left exactly as it was.

IMPORTANT: Validation NEVER silently fixes input beyond normalization
the user would expect (trimming whitespace, accepting "45,50" for 45.50).
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from spendly.models.ledger import ValidationIssue


class ValidationError(Exception):
    """User input was rejected; nothing was changed."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))

    def to_dicts(self) -> list[dict]:
        return [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in self.issues
        ]


class LedgerInputValidator:
    """
    Validates raw user input for expenses, categories and the balance.

    Each check returns the normalized value or appends to `issues`;
    the public validate_* methods raise once all checks have run.
    """

    def _parse_amount(
        self,
        field: str,
        raw: Any,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        """Parse a strictly positive amount from Decimal, number or text."""
        if raw is None or isinstance(raw, bool):
            value = None
        elif isinstance(raw, Decimal):
            value = raw
        elif isinstance(raw, (int, float)):
            value = Decimal(str(raw))
        else:
            text = str(raw).strip().replace(",", ".")
            try:
                value = Decimal(text) if text else None
            except InvalidOperation:
                value = None

        if value is None or not value.is_finite():
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_numeric",
                message="Please enter a valid amount",
            ))
            return None

        if value <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_positive",
                message="Amount must be greater than zero",
            ))
            return None

        return value

    def _require_text(
        self,
        field: str,
        raw: Optional[str],
        issues: list[ValidationIssue],
        label: str,
    ) -> Optional[str]:
        text = (raw or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
            ))
            return None
        return text

    def validate_expense(
        self,
        amount: Any,
        description: Optional[str],
    ) -> tuple[Decimal, str]:
        """
        Validate the add/edit expense form.

        Returns:
            (amount, description) normalized

        Raises:
            ValidationError: amount not a positive number or description empty
        """
        issues: list[ValidationIssue] = []
        value = self._parse_amount("amount", amount, issues)
        text = self._require_text("description", description, issues, "Description")
        if issues:
            raise ValidationError(issues)
        return value, text

    def validate_balance(self, amount: Any) -> Decimal:
        """
        Validate the set-balance form.

        Raises:
            ValidationError: amount not a positive number
        """
        issues: list[ValidationIssue] = []
        value = self._parse_amount("total_amount", amount, issues)
        if issues:
            raise ValidationError(issues)
        return value

    def validate_category_name(self, name: Optional[str]) -> str:
        """
        Validate the add-category form.

        Raises:
            ValidationError: name empty after trimming
        """
        issues: list[ValidationIssue] = []
        text = self._require_text("name", name, issues, "Category name")
        if issues:
            raise ValidationError(issues)
        return text

    def get_user_friendly_summary(self, error: ValidationError) -> str:
        """One line per issue, suitable for an alert."""
        return "\n".join(f"• {issue.message}" for issue in error.issues)
