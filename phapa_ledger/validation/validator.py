"""
Entry Form Validation

Checks what the user typed into the add-entry form before an Entry is
created:
- Title and amount must be present; title and note have length limits
- Amount must parse as a finite number and be above zero
- Missing category and odd precision are reported as warnings

IMPORTANT: Validation never fixes input. It reports issues; the
session decides what to do with them (an invalid submission is
dropped without creating anything).
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from phapa_ledger.models.entry import (
    EntryForm,
    ValidationIssue,
    ValidationResult,
)

TITLE_MAX_LENGTH = 200
NOTE_MAX_LENGTH = 1000


def parse_amount(raw: str) -> Optional[Decimal]:
    """
    Parse a typed amount. Thousands separators and spaces are allowed.

    Returns None for blank, malformed or non-finite input.
    """
    cleaned = raw.replace(",", "").replace(" ", "").strip()
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


class EntryValidator:
    """Validates add-entry form input."""

    def validate(self, form: EntryForm) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._check_title(form.title))
        amount, amount_issues = self._check_amount(form.amount)
        issues.extend(amount_issues)
        issues.extend(self._check_note(form.note))

        if form.category is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="No category selected; the entry will not appear in category totals",
                severity="warning",
            ))

        return ValidationResult(issues=issues, amount=amount)

    def _check_title(self, title: str) -> list[ValidationIssue]:
        if not title:
            return [ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title or donor name is required",
                severity="error",
            )]
        if len(title) > TITLE_MAX_LENGTH:
            return [ValidationIssue(
                field="title",
                issue_type="too_long",
                message=f"Title must be at most {TITLE_MAX_LENGTH} characters",
                severity="error",
            )]
        return []

    def _check_note(self, note: Optional[str]) -> list[ValidationIssue]:
        if note and len(note) > NOTE_MAX_LENGTH:
            return [ValidationIssue(
                field="note",
                issue_type="too_long",
                message=f"Note must be at most {NOTE_MAX_LENGTH} characters",
                severity="error",
            )]
        return []

    def _check_amount(
        self,
        raw: str,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        if not raw.strip():
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            )]

        amount = parse_amount(raw)
        if amount is None:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"'{raw}' is not a valid amount",
                severity="error",
            )]

        if amount <= 0:
            return amount, [ValidationIssue(
                field="amount",
                issue_type="non_positive",
                message="Amount must be greater than zero",
                severity="error",
            )]

        issues = []
        if amount.as_tuple().exponent < -2:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="precision",
                message="Amount has more than two decimal places",
                severity="warning",
            ))
        return amount, issues
