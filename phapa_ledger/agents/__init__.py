"""AI Agents package."""

from phapa_ledger.agents.insight_agent import (
    INSIGHT_CONNECTION_ERROR_MESSAGE,
    INSIGHT_UNAVAILABLE_MESSAGE,
    InsightAgent,
)

__all__ = [
    "INSIGHT_CONNECTION_ERROR_MESSAGE",
    "INSIGHT_UNAVAILABLE_MESSAGE",
    "InsightAgent",
]
