"""
Data Models Package

This package contains all Pydantic models used in the Pha Pa Ledger.
All data flowing through the system must conform to these schemas.
"""

from phapa_ledger.models.entry import (
    BudgetSummary,
    CategoryNet,
    Entry,
    EntryCategory,
    EntryForm,
    EntryKind,
    LedgerTab,
    ValidationIssue,
    ValidationResult,
    format_amount,
    thai_display_date,
)

__all__ = [
    "BudgetSummary",
    "CategoryNet",
    "Entry",
    "EntryCategory",
    "EntryForm",
    "EntryKind",
    "LedgerTab",
    "ValidationIssue",
    "ValidationResult",
    "format_amount",
    "thai_display_date",
]
