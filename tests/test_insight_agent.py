"""Tests for the Gemini insight agent. The model is always mocked."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from phapa_ledger.agents import (
    INSIGHT_CONNECTION_ERROR_MESSAGE,
    INSIGHT_UNAVAILABLE_MESSAGE,
    InsightAgent,
)
from phapa_ledger.aggregation import summarize
from phapa_ledger.config import GeminiSettings
from phapa_ledger.models.entry import Entry, EntryKind


class BlockedResponse:
    """Mimics a response whose .text raises because it was blocked."""

    @property
    def text(self):
        raise ValueError("response has no candidates")


def model_returning(response) -> MagicMock:
    model = MagicMock()
    model.generate_content_async = AsyncMock(return_value=response)
    return model


class TestBuildPrompt:
    """Tests for the prompt text."""

    def test_includes_totals_and_categories(self, sample_entries, ledger_settings):
        agent = InsightAgent(model=MagicMock(), ledger_settings=ledger_settings)
        prompt = agent.build_prompt(sample_entries, summarize(sample_entries))

        assert "Total income: 1,500" in prompt
        assert "Total expense: 300" in prompt
        assert "Net balance: 1,200" in prompt
        assert "หมวดโต๊ะจีน: income 1,000, expense 300, net 700" in prompt
        assert "หมวดแก้ว" in prompt
        assert ledger_settings.organizer in prompt

    def test_includes_projection(self, ledger_settings):
        entries = [Entry(kind=EntryKind.INCOME, title="A", amount=Decimal("45000"))]
        agent = InsightAgent(model=MagicMock(), ledger_settings=ledger_settings)
        prompt = agent.build_prompt(entries, summarize(entries))

        assert "reached 22.5%" in prompt
        assert "the balance buys 2 " in prompt

    def test_samples_recent_entries(self, ledger_settings):
        entries = [
            Entry(kind=EntryKind.INCOME, title=f"donor-{i}", amount=Decimal("10"))
            for i in range(15)
        ]
        agent = InsightAgent(
            model=MagicMock(),
            gemini_settings=GeminiSettings(api_key="test", sample_size=3),
            ledger_settings=ledger_settings,
        )
        prompt = agent.build_prompt(entries, summarize(entries))

        assert "donor-0" in prompt
        assert "donor-2" in prompt
        assert "donor-3" not in prompt

    def test_default_sample_is_ten(self, ledger_settings):
        entries = [
            Entry(kind=EntryKind.INCOME, title=f"donor-{i}", amount=Decimal("10"))
            for i in range(12)
        ]
        agent = InsightAgent(model=MagicMock(), ledger_settings=ledger_settings)
        prompt = agent.build_prompt(entries, summarize(entries))

        assert "donor-9" in prompt
        assert "donor-10" not in prompt

    def test_sample_size_from_environment(self, monkeypatch, ledger_settings):
        """GEMINI_SAMPLE_SIZE applies to the very first prompt."""
        monkeypatch.setenv("GEMINI_API_KEY", "test")
        monkeypatch.setenv("GEMINI_SAMPLE_SIZE", "2")
        entries = [
            Entry(kind=EntryKind.INCOME, title=f"donor-{i}", amount=Decimal("10"))
            for i in range(5)
        ]
        agent = InsightAgent(model=MagicMock(), ledger_settings=ledger_settings)
        prompt = agent.build_prompt(entries, summarize(entries))

        assert "donor-1" in prompt
        assert "donor-2" not in prompt

    def test_empty_ledger(self, ledger_settings):
        agent = InsightAgent(model=MagicMock(), ledger_settings=ledger_settings)
        prompt = agent.build_prompt([], summarize([]))
        assert "(no entries yet)" in prompt


class TestRequestInsight:
    """Tests for request_insight() and its fallbacks."""

    @pytest.mark.asyncio
    async def test_returns_model_text(self, sample_entries, ledger_settings):
        model = model_returning(MagicMock(text="  งบประมาณเป็นไปด้วยดีครับ  "))
        agent = InsightAgent(model=model, ledger_settings=ledger_settings)

        text = await agent.request_insight(sample_entries, summarize(sample_entries))

        assert text == "งบประมาณเป็นไปด้วยดีครับ"
        model.generate_content_async.assert_awaited_once()
        prompt = model.generate_content_async.await_args.args[0]
        assert "Net balance: 1,200" in prompt

    @pytest.mark.asyncio
    async def test_empty_text_gives_unavailable(self, sample_entries, ledger_settings):
        agent = InsightAgent(
            model=model_returning(MagicMock(text="")),
            ledger_settings=ledger_settings,
        )
        text = await agent.request_insight(sample_entries, summarize(sample_entries))
        assert text == INSIGHT_UNAVAILABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_none_text_gives_unavailable(self, sample_entries, ledger_settings):
        agent = InsightAgent(
            model=model_returning(MagicMock(text=None)),
            ledger_settings=ledger_settings,
        )
        text = await agent.request_insight(sample_entries, summarize(sample_entries))
        assert text == INSIGHT_UNAVAILABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_blocked_response_gives_unavailable(self, sample_entries, ledger_settings):
        agent = InsightAgent(
            model=model_returning(BlockedResponse()),
            ledger_settings=ledger_settings,
        )
        text = await agent.request_insight(sample_entries, summarize(sample_entries))
        assert text == INSIGHT_UNAVAILABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_network_error_gives_connection_message(self, sample_entries, ledger_settings):
        model = MagicMock()
        model.generate_content_async = AsyncMock(side_effect=ConnectionError("unreachable"))
        agent = InsightAgent(model=model, ledger_settings=ledger_settings)

        text = await agent.request_insight(sample_entries, summarize(sample_entries))

        assert text == INSIGHT_CONNECTION_ERROR_MESSAGE
        model.generate_content_async.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_api_key_gives_connection_message(self, sample_entries, ledger_settings):
        """No GEMINI_API_KEY configured: fallback, no exception."""
        agent = InsightAgent(ledger_settings=ledger_settings)
        text = await agent.request_insight(sample_entries, summarize(sample_entries))
        assert text == INSIGHT_CONNECTION_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_first_request_uses_configured_sample_size(self, monkeypatch, ledger_settings):
        monkeypatch.setenv("GEMINI_API_KEY", "test")
        monkeypatch.setenv("GEMINI_SAMPLE_SIZE", "1")
        entries = [
            Entry(kind=EntryKind.INCOME, title=f"donor-{i}", amount=Decimal("10"))
            for i in range(3)
        ]
        model = model_returning(MagicMock(text="ok"))
        agent = InsightAgent(model=model, ledger_settings=ledger_settings)

        await agent.request_insight(entries, summarize(entries))

        prompt = model.generate_content_async.await_args.args[0]
        assert "donor-0" in prompt
        assert "donor-1" not in prompt

    @pytest.mark.asyncio
    async def test_model_created_from_settings(self, monkeypatch, sample_entries, ledger_settings):
        """The model is configured from GeminiSettings on first use."""
        import phapa_ledger.agents.insight_agent as module

        fake_model = model_returning(MagicMock(text="ok"))
        configure = MagicMock()
        factory = MagicMock(return_value=fake_model)
        monkeypatch.setattr(module.genai, "configure", configure)
        monkeypatch.setattr(module.genai, "GenerativeModel", factory)

        agent = InsightAgent(
            gemini_settings=GeminiSettings(api_key="secret", model_name="gemini-test"),
            ledger_settings=ledger_settings,
        )
        assert await agent.request_insight(sample_entries, summarize(sample_entries)) == "ok"
        assert await agent.request_insight(sample_entries, summarize(sample_entries)) == "ok"

        configure.assert_called_once_with(api_key="secret")
        factory.assert_called_once()
        assert factory.call_args.kwargs["model_name"] == "gemini-test"
