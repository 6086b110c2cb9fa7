"""Pytest fixtures and configuration for Second Brain tests"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Set up test environment variables before importing modules
os.environ.setdefault("PATTERN_SCHEDULER_ENABLED", "false")
os.environ.setdefault("LLM_PROVIDER", "none")
os.environ.setdefault("LOG_LEVEL", "warning")

from second_brain.config import Settings  # noqa: E402
from second_brain.providers import plugin_loader  # noqa: E402
from second_brain.providers.note_store.sqlite import SQLiteNoteStore  # noqa: E402
from second_brain.providers.pattern_store.sqlite import SQLitePatternStore  # noqa: E402
from second_brain.providers.resilience import HttpClientFactory  # noqa: E402
from second_brain.types import Note  # noqa: E402

# A Wednesday, noon UTC
FIXED_NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Pooled HTTP clients and discovered providers are process-wide"""
    yield
    HttpClientFactory.reset()
    plugin_loader.reset()


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway database"""
    return Settings(
        _env_file=None,
        database_path=str(tmp_path / "second_brain.db"),
        llm_provider="none",
        pattern_scheduler_enabled=False,
    )


@pytest.fixture
def note_store(test_settings):
    return SQLiteNoteStore(test_settings)


@pytest.fixture
def pattern_store(test_settings):
    return SQLitePatternStore(test_settings)


@pytest.fixture
def mock_llm_provider():
    """Mock LLM provider"""
    provider = MagicMock()
    provider.generate.return_value = "This theme is clearly on your mind."
    provider.get_name.return_value = "MockLLMProvider"
    provider.get_default_model.return_value = "mock-model"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def failing_llm_provider():
    """LLM provider whose every call fails"""
    from second_brain.providers.base import ProviderError

    provider = MagicMock()
    provider.generate.side_effect = ProviderError("connection refused", provider="mock")
    provider.get_name.return_value = "FailingLLMProvider"
    return provider


@pytest.fixture
def make_note():
    """Build an in-memory note created `days_ago` before FIXED_NOW"""
    counter = {"n": 0}

    def _make(tags, days_ago=0, title=None, id=None):
        counter["n"] += 1
        created = FIXED_NOW - timedelta(days=days_ago)
        return Note(
            id=id or f"note-{counter['n']}",
            title=title or f"Note {counter['n']}",
            content="content",
            tags=list(tags),
            created_at=created,
            updated_at=created,
        )

    return _make


@pytest.fixture
def add_note(note_store):
    """Persist a note created `days_ago` before FIXED_NOW"""

    def _add(tags, days_ago=0, title="Untitled"):
        return note_store.create(
            title=title,
            content="content",
            tags=list(tags),
            created_at=FIXED_NOW - timedelta(days=days_ago),
        )

    return _add
