"""Validation package."""

from phapa_ledger.validation.validator import EntryValidator, parse_amount

__all__ = ["EntryValidator", "parse_amount"]
