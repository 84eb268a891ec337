"""Smoke tests for the Streamlit dashboard, run headless with AppTest."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

import phapa_ledger.orchestrator as orchestrator
from phapa_ledger.services.storage import InMemoryStorage

APP_PATH = Path(__file__).resolve().parents[1] / "app" / "main.py"


@pytest.fixture
def session(monkeypatch, ledger_settings):
    session = orchestrator.create_session(
        storage=InMemoryStorage(),
        ledger_settings=ledger_settings,
        insight_agent=MagicMock(),
    )
    monkeypatch.setattr(orchestrator, "create_session", lambda: session)
    st.cache_resource.clear()
    yield session
    st.cache_resource.clear()


class TestDashboard:
    """Tests for app/main.py."""

    def test_renders_entries(self, session):
        session.submit_entry(title="คุณสมชาย", amount="500")

        at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

        assert not at.exception
        assert any("500" in m.value for m in at.metric)

    def test_insight_text_is_escaped(self, session):
        session.last_insight = "<script>alert(1)</script> ยอดบริจาคดีมาก"

        at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

        assert not at.exception
        values = [m.value for m in at.markdown]
        assert any("&lt;script&gt;alert(1)&lt;/script&gt; ยอดบริจาคดีมาก" in v for v in values)
        assert not any("<script>" in v for v in values)
