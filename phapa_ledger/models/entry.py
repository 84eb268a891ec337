"""
Core Data Models for Pha Pa Ledger

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be serializable for the key-value storage slot
3. Load records written before a field existed

DESIGN DECISION: Entry is the only persisted model. BudgetSummary and
CategoryNet are always derived from a list of entries and never stored.
Entry carries no sign or length limits; those belong to the add-entry
form (see validation), so every record written earlier still loads.
"""

from datetime import date as date_type
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """Whether money came in or went out. Fixed at creation."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


class EntryCategory(str, Enum):
    """
    Event-specific categories.

    DESIGN DECISION: Closed set. Entries saved before categories were
    introduced have no category and are left out of category buckets.
    """
    CATERING = "CATERING"
    DRINKS = "DRINKS"
    GLASSWARE = "GLASSWARE"
    DONATION = "DONATION"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


class LedgerTab(str, Enum):
    """Filter tabs above the ledger table."""
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


_KIND_LABELS = {
    EntryKind.INCOME: "รายรับ",
    EntryKind.EXPENSE: "รายจ่าย",
}

_CATEGORY_LABELS = {
    EntryCategory.CATERING: "หมวดโต๊ะจีน",
    EntryCategory.DRINKS: "หมวดเครื่องดื่ม",
    EntryCategory.GLASSWARE: "หมวดแก้ว",
    EntryCategory.DONATION: "หมวดรับบริจาค",
}

# Older saves stored the display label instead of the key
_CATEGORY_BY_LABEL = {label: cat for cat, label in _CATEGORY_LABELS.items()}


def thai_display_date(moment: date_type) -> str:
    """
    Format a date the way Thai locale short dates read: d/m/yyyy
    with the Buddhist-era year.

    >>> thai_display_date(date_type(2026, 4, 12))
    '12/4/2569'
    """
    return f"{moment.day}/{moment.month}/{moment.year + 543}"


def format_amount(amount: Decimal) -> str:
    """
    Group thousands; show satang only when there are any.

    >>> format_amount(Decimal("1500"))
    '1,500'
    >>> format_amount(Decimal("1234.5"))
    '1,234.50'
    """
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    One recorded income or expense.

    Entries are frozen. They are created once and later removed by id;
    nothing edits them in place.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique entry ID"
    )
    kind: EntryKind = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="Income or expense"
    )
    category: Optional[EntryCategory] = Field(
        default=None,
        description="Event category (absent on legacy records)"
    )
    title: str = Field(
        ...,
        description="Donor name or expense description"
    )
    amount: Decimal = Field(
        ...,
        description="Amount in the event currency (any finite value)"
    )
    display_date: str = Field(
        default="",
        validation_alias=AliasChoices("display_date", "date"),
        description="Creation date as shown to the user"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Sortable creation timestamp (absent on legacy records)"
    )
    note: Optional[str] = None
    receipt_image: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("receipt_image", "receiptImage"),
        description="Base64 receipt photo"
    )

    @field_validator('category', mode='before')
    @classmethod
    def accept_category_label(cls, v: Any) -> Any:
        """Map a stored display label back to its category."""
        if isinstance(v, str) and v in _CATEGORY_BY_LABEL:
            return _CATEGORY_BY_LABEL[v]
        if v == "":
            return None
        return v

    @classmethod
    def new(
        cls,
        kind: EntryKind,
        title: str,
        amount: Decimal,
        category: Optional[EntryCategory] = None,
        note: Optional[str] = None,
        receipt_image: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Entry":
        """Create an entry stamped with a fresh id and the current date."""
        now = now or _utcnow()
        return cls(
            kind=kind,
            category=category,
            title=title,
            amount=amount,
            display_date=thai_display_date(now.astimezone().date()),
            created_at=now,
            note=note,
            receipt_image=receipt_image,
        )

    @property
    def is_income(self) -> bool:
        return self.kind == EntryKind.INCOME

    @property
    def signed_amount(self) -> Decimal:
        """Amount with expenses negated."""
        return self.amount if self.is_income else -self.amount


# =============================================================================
# DERIVED MODELS
# =============================================================================

class BudgetSummary(BaseModel):
    """
    Totals derived from the full entry list.

    Never stored. Recomputed from entries on every read.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")

    @model_validator(mode='after')
    def validate_balance(self) -> 'BudgetSummary':
        if self.balance != self.total_income - self.total_expense:
            raise ValueError("Balance must equal total income minus total expense")
        return self


class CategoryNet(BaseModel):
    """Income, expense and their difference for one category."""
    model_config = ConfigDict(frozen=True)

    category: EntryCategory
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


# =============================================================================
# FORM AND VALIDATION MODELS
# =============================================================================

class EntryForm(BaseModel):
    """
    Raw values from the add-entry form.

    Title and amount arrive as typed by the user; kind and category
    come from the current toggle selection.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    amount: str = ""
    kind: EntryKind = EntryKind.INCOME
    category: Optional[EntryCategory] = None
    note: Optional[str] = None
    receipt_image: Optional[str] = None

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'non_positive')"
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


class ValidationResult(BaseModel):
    """Result of validating an EntryForm."""

    validated_at: datetime = Field(
        default_factory=_utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount, when it could be parsed"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
