"""Shared fixtures. No test touches the network or the real storage file."""

import os
import time
from decimal import Decimal

import pytest

from phapa_ledger.config import LedgerSettings, get_settings
from phapa_ledger.models.entry import Entry, EntryCategory, EntryKind
from phapa_ledger.services.storage import InMemoryStorage


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test from an empty directory with no Gemini key."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def bangkok_time():
    """Switch the process local time zone to UTC+7."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "ICT-7"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(
        storage_key="test_transactions",
        goal_target=Decimal("200000"),
        unit_price=Decimal("20000"),
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def sample_entries() -> list[Entry]:
    """Newest first, as the store keeps them."""
    return [
        Entry(
            kind=EntryKind.INCOME,
            category=EntryCategory.DONATION,
            title="คุณสมชาย",
            amount=Decimal("500"),
            display_date="12/4/2569",
        ),
        Entry(
            kind=EntryKind.EXPENSE,
            category=EntryCategory.CATERING,
            title="โต๊ะจีน 10 โต๊ะ",
            amount=Decimal("300"),
            display_date="12/4/2569",
        ),
        Entry(
            kind=EntryKind.INCOME,
            category=EntryCategory.CATERING,
            title="ขายบัตรโต๊ะจีน",
            amount=Decimal("1000"),
            display_date="11/4/2569",
        ),
    ]
