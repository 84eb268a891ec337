"""Aggregation package - pure derivations over the entry list."""

from phapa_ledger.aggregation.aggregator import (
    affordable_units,
    by_category,
    category_breakdown,
    category_net,
    filter_by_kind,
    goal_progress,
    recent_entries,
    summarize,
)

__all__ = [
    "affordable_units",
    "by_category",
    "category_breakdown",
    "category_net",
    "filter_by_kind",
    "goal_progress",
    "recent_entries",
    "summarize",
]
