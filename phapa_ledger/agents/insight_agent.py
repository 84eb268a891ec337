"""
AI Insight Agent for Pha Pa Ledger

DESIGN DECISION: The insight is a convenience, not a feature the ledger
depends on. The agent therefore never raises: every failure is logged
and turned into one of two fixed messages the UI can show as-is.

BOUNDARIES:
- CAN: Comment on the totals and category breakdown it is given
- CAN: Encourage the organizers and donors
- CANNOT: Change, add or remove entries
- CANNOT: Do its own arithmetic - progress and affordable units are
  computed here and handed to the model as facts

One request per call. No retry, no timeout of our own.
"""

from collections.abc import Sequence
from typing import Any, Optional

import google.generativeai as genai
from pydantic import ValidationError

from phapa_ledger.aggregation import (
    affordable_units,
    category_breakdown,
    goal_progress,
    recent_entries,
)
from phapa_ledger.config import GeminiSettings, LedgerSettings, get_settings
from phapa_ledger.logging_config import get_logger
from phapa_ledger.models.entry import BudgetSummary, Entry, format_amount

logger = get_logger(__name__)

# "Sorry, unable to analyze the data at this time"
INSIGHT_UNAVAILABLE_MESSAGE = "ขออภัย ไม่สามารถวิเคราะห์ข้อมูลได้ในขณะนี้"
# "An error occurred connecting to the AI"
INSIGHT_CONNECTION_ERROR_MESSAGE = "เกิดข้อผิดพลาดในการเชื่อมต่อกับ AI"


class InsightAgent:
    """
    Asks Gemini for a short budget commentary.

    The model is created on first use so that a missing API key only
    surfaces as the fallback message, never at construction time.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        gemini_settings: Optional[GeminiSettings] = None,
        ledger_settings: Optional[LedgerSettings] = None,
    ):
        self._model = model
        self._gemini_settings = gemini_settings
        self._ledger_settings = ledger_settings

    @property
    def ledger_settings(self) -> LedgerSettings:
        if self._ledger_settings is None:
            self._ledger_settings = get_settings().ledger
        return self._ledger_settings

    @property
    def gemini_settings(self) -> GeminiSettings:
        """
        Gemini settings, loaded from the environment on first use.

        Raises:
            ValidationError: GEMINI_API_KEY is not set
        """
        if self._gemini_settings is None:
            self._gemini_settings = get_settings().gemini
        return self._gemini_settings

    @property
    def sample_size(self) -> int:
        try:
            return self.gemini_settings.sample_size
        except ValidationError:
            return GeminiSettings.model_fields["sample_size"].default

    def _get_model(self) -> Any:
        """Configure Google Generative AI and create the model."""
        if self._model is None:
            settings = self.gemini_settings
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        return self._model

    def build_prompt(self, entries: Sequence[Entry], summary: BudgetSummary) -> str:
        """Compose the prompt from the summary, categories and recent entries."""
        ledger = self.ledger_settings
        currency = ledger.currency_label

        category_lines = "\n".join(
            f"- {row.category.label}: income {format_amount(row.income)}, "
            f"expense {format_amount(row.expense)}, net {format_amount(row.net)} {currency}"
            for row in category_breakdown(entries)
        )

        sample = recent_entries(entries, self.sample_size)
        if sample:
            entry_lines = "\n".join(
                f"- [{entry.kind.label}] {entry.title}: {format_amount(entry.amount)} {currency}"
                + (f" ({entry.category.label})" if entry.category else "")
                for entry in sample
            )
        else:
            entry_lines = "- (no entries yet)"

        progress = goal_progress(summary.balance, ledger.goal_target)
        units = affordable_units(summary.balance, ledger.unit_price)

        return f"""You are assisting the organizing committee of a Thai merit-making fundraiser.

Event: {ledger.event_name}
Organizer: {ledger.organizer}
Date: {ledger.event_date}

Totals:
- Total income: {format_amount(summary.total_income)} {currency}
- Total expense: {format_amount(summary.total_expense)} {currency}
- Net balance: {format_amount(summary.balance)} {currency}

By category:
{category_lines}

Most recent entries (newest first, up to {self.sample_size}):
{entry_lines}

Facts already calculated (use these numbers as given):
- Fundraising goal: {format_amount(ledger.goal_target)} {currency}, reached {progress:.1f}%
- One computer costs about {format_amount(ledger.unit_price)} {currency}; the balance buys {units} {ledger.unit_name}

Task:
1. Give short advice on managing the budget across the four categories (catering, drinks, glassware, donations)
2. State how many computers the remaining balance can fund
3. Encourage the committee and the donors
4. Answer in formal but polite Thai, no more than 150 words

Use ONLY the data above. Do not invent donors, amounts or categories."""

    async def request_insight(
        self,
        entries: Sequence[Entry],
        summary: BudgetSummary,
    ) -> str:
        """
        Get the commentary text, or a fallback message.

        Never raises.
        """
        try:
            prompt = self.build_prompt(entries, summary)
            model = self._get_model()
            response = await model.generate_content_async(prompt)
        except Exception as e:
            logger.error(
                "insight_request_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return INSIGHT_CONNECTION_ERROR_MESSAGE

        text = self._extract_text(response)
        if not text:
            logger.warning("insight_empty_response")
            return INSIGHT_UNAVAILABLE_MESSAGE

        logger.info("insight_received", length=len(text), entry_count=len(entries))
        return text

    @staticmethod
    def _extract_text(response: Any) -> str:
        """
        Pull the text out of a response.

        response.text raises ValueError when the reply was blocked or
        has no candidates; that counts as an empty answer.
        """
        try:
            text = response.text
        except (AttributeError, ValueError):
            return ""
        if not isinstance(text, str):
            return ""
        return text.strip()
