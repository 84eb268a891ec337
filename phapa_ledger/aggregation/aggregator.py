"""
Ledger Aggregation

DESIGN DECISION: Every derived number is a pure function of the entry
list. Nothing here keeps state or caches results; callers pass
store.snapshot() and get fresh values back. At event scale (a few
hundred entries) recomputing on every read costs nothing.

Amounts are Decimal throughout. Zero and negative amounts are summed
as-is; rejecting them is the validator's job, not ours.
"""

import math
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Union

from phapa_ledger.models.entry import (
    BudgetSummary,
    CategoryNet,
    Entry,
    EntryCategory,
    EntryKind,
    LedgerTab,
)

ZERO = Decimal("0")


def summarize(entries: Iterable[Entry]) -> BudgetSummary:
    """Total income, total expense and balance. Empty input gives zeros."""
    income = ZERO
    expense = ZERO
    for entry in entries:
        if entry.kind == EntryKind.INCOME:
            income += entry.amount
        else:
            expense += entry.amount
    return BudgetSummary(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
    )


def by_category(
    entries: Iterable[Entry],
    positive_only: bool = False,
) -> dict[EntryCategory, Decimal]:
    """
    Sum of amounts per category, income and expense mixed together.

    Entries without a category are skipped. With positive_only the
    buckets whose sum is not above zero are dropped, which is what the
    category chart shows.
    """
    totals: dict[EntryCategory, Decimal] = {}
    for entry in entries:
        if entry.category is None:
            continue
        totals[entry.category] = totals.get(entry.category, ZERO) + entry.amount

    if positive_only:
        return {cat: amount for cat, amount in totals.items() if amount > 0}
    return totals


def category_net(entries: Iterable[Entry], category: EntryCategory) -> CategoryNet:
    """Income, expense and net for a single category."""
    income = ZERO
    expense = ZERO
    for entry in entries:
        if entry.category != category:
            continue
        if entry.kind == EntryKind.INCOME:
            income += entry.amount
        else:
            expense += entry.amount
    return CategoryNet(category=category, income=income, expense=expense)


def category_breakdown(entries: Iterable[Entry]) -> list[CategoryNet]:
    """One CategoryNet per category, in declaration order."""
    entries = list(entries)
    return [category_net(entries, category) for category in EntryCategory]


def goal_progress(balance: Decimal, target: Decimal) -> float:
    """
    Percent of the goal reached, capped at 100.

    A negative balance gives a negative percent; it is left unclamped
    so a shortfall stays visible.
    """
    if target <= 0:
        raise ValueError(f"Goal target must be positive, got {target}")
    percent = Decimal(balance) / Decimal(target) * 100
    return float(min(percent, Decimal(100)))


def affordable_units(balance: Decimal, unit_price: Decimal) -> int:
    """
    How many whole units the balance pays for.

    floor(balance / unit_price), never below zero.
    """
    if unit_price <= 0:
        raise ValueError(f"Unit price must be positive, got {unit_price}")
    units = math.floor(Decimal(balance) / Decimal(unit_price))
    return max(units, 0)


def filter_by_kind(
    entries: Iterable[Entry],
    tab: Union[LedgerTab, str],
) -> list[Entry]:
    """Entries shown under a ledger tab, in their original order."""
    tab = LedgerTab(tab)
    if tab == LedgerTab.ALL:
        return list(entries)
    kind = EntryKind.INCOME if tab == LedgerTab.INCOME else EntryKind.EXPENSE
    return [entry for entry in entries if entry.kind == kind]


def recent_entries(entries: Sequence[Entry], limit: int = 10) -> list[Entry]:
    """
    The newest entries, newest first.

    The store keeps entries newest first, so this is a head slice.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    return list(entries[:limit])
