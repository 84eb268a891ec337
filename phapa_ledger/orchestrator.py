"""
Main Orchestrator for Pha Pa Ledger

This module ties together all the components a UI needs:
1. Entry form (selection state → validate → create)
2. Ledger table (tab filter, delete)
3. Dashboard numbers (summary, charts, goal projection)
4. AI insight (one request at a time)
5. Printable report

DESIGN DECISION: The session holds UI state (selected kind and
category, active tab, insight loading flag) but no derived numbers.
Every read recomputes from store.snapshot().
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from phapa_ledger.agents import InsightAgent
from phapa_ledger.aggregation import (
    affordable_units,
    by_category,
    filter_by_kind,
    goal_progress,
    summarize,
)
from phapa_ledger.config import LedgerSettings, get_settings
from phapa_ledger.logging_config import configure_logging, get_logger
from phapa_ledger.models.entry import (
    BudgetSummary,
    Entry,
    EntryCategory,
    EntryForm,
    EntryKind,
    LedgerTab,
)
from phapa_ledger.reports import render_report
from phapa_ledger.services.storage import JsonFileStorage, KeyValueStorageInterface
from phapa_ledger.store import LedgerStore
from phapa_ledger.validation import EntryValidator

logger = get_logger(__name__)


class LedgerSession:
    """
    One user's working session over a ledger.

    Form submissions take kind and category from the current
    selection, the way the toggle buttons above the form work.
    """

    def __init__(
        self,
        store: LedgerStore,
        insight_agent: Optional[InsightAgent] = None,
        validator: Optional[EntryValidator] = None,
        ledger_settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._settings = ledger_settings or get_settings().ledger
        self._insight_agent = insight_agent or InsightAgent(ledger_settings=self._settings)
        self._validator = validator or EntryValidator()

        self.selected_kind: EntryKind = EntryKind.INCOME
        self.selected_category: Optional[EntryCategory] = EntryCategory.DONATION
        self.active_tab: LedgerTab = LedgerTab.ALL

        self.insight_loading: bool = False
        self.last_insight: Optional[str] = None

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    # -------------------------------------------------------------------------
    # Selection state
    # -------------------------------------------------------------------------

    def select_kind(self, kind: Union[EntryKind, str]) -> None:
        self.selected_kind = EntryKind(kind)

    def select_category(self, category: Optional[Union[EntryCategory, str]]) -> None:
        self.selected_category = EntryCategory(category) if category is not None else None

    def select_tab(self, tab: Union[LedgerTab, str]) -> None:
        self.active_tab = LedgerTab(tab)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def submit_entry(
        self,
        title: str,
        amount: Union[str, Decimal, int, float, None],
        note: Optional[str] = None,
        receipt_image: Optional[str] = None,
    ) -> Optional[Entry]:
        """
        Create an entry from form input.

        Returns None, creating nothing, when the input has errors
        (missing title, missing or non-positive amount).
        """
        form = EntryForm(
            title=title or "",
            amount=amount,
            kind=self.selected_kind,
            category=self.selected_category,
            note=note or None,
            receipt_image=receipt_image,
        )
        result = self._validator.validate(form)
        if result.has_errors:
            logger.debug(
                "entry_submission_ignored",
                issues=[f"{i.field}:{i.issue_type}" for i in result.issues],
            )
            return None

        return self._store.create(
            kind=form.kind,
            title=form.title,
            amount=result.amount,
            category=form.category,
            note=form.note,
            receipt_image=form.receipt_image,
        )

    def delete_entry(self, entry_id: Union[UUID, str]) -> bool:
        return self._store.remove(entry_id)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def summary(self) -> BudgetSummary:
        return summarize(self._store.snapshot())

    def visible_entries(self) -> list[Entry]:
        """Entries under the active tab, newest first."""
        return filter_by_kind(self._store.snapshot(), self.active_tab)

    def income_expense_chart(self) -> dict[str, Decimal]:
        """Bar chart data: income vs expense, keyed by display label."""
        summary = self.summary()
        return {
            EntryKind.INCOME.label: summary.total_income,
            EntryKind.EXPENSE.label: summary.total_expense,
        }

    def category_chart(self) -> dict[str, Decimal]:
        """Bar chart data: categories with a positive total."""
        totals = by_category(self._store.snapshot(), positive_only=True)
        return {category.label: amount for category, amount in totals.items()}

    def goal_progress(self) -> float:
        return goal_progress(self.summary().balance, self._settings.goal_target)

    def affordable_units(self) -> int:
        return affordable_units(self.summary().balance, self._settings.unit_price)

    def report(self) -> str:
        return render_report(self._store.snapshot(), self._settings)

    # -------------------------------------------------------------------------
    # AI insight
    # -------------------------------------------------------------------------

    async def request_insight(self) -> Optional[str]:
        """
        Ask for an AI commentary on the current ledger.

        Returns None without calling out if a request is already in
        flight. Entries added meanwhile are not reflected in the result.
        """
        if self.insight_loading:
            logger.debug("insight_request_skipped", reason="already_loading")
            return None

        self.insight_loading = True
        try:
            entries = self._store.snapshot()
            text = await self._insight_agent.request_insight(entries, summarize(entries))
        finally:
            self.insight_loading = False

        self.last_insight = text
        return text


def create_session(
    storage: Optional[KeyValueStorageInterface] = None,
    ledger_settings: Optional[LedgerSettings] = None,
    insight_agent: Optional[InsightAgent] = None,
) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        storage: Key-value backend. Defaults to the JSON file named
                 in LedgerSettings.storage_path.
        ledger_settings: Event settings. Defaults to environment.
        insight_agent: Gemini agent. Defaults to one built from settings.

    Returns:
        A session whose store persists after every change
    """
    configure_logging()

    settings = ledger_settings or get_settings().ledger
    storage = storage or JsonFileStorage(settings.storage_path)
    store = LedgerStore.open(storage, settings.storage_key)

    return LedgerSession(
        store=store,
        insight_agent=insight_agent,
        ledger_settings=settings,
    )
