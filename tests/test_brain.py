"""Tests for the SecondBrain service root"""

from datetime import timezone
from unittest.mock import MagicMock, patch

import pytest

import second_brain.brain as brain_module
from second_brain.brain import SecondBrain, get_brain
from second_brain.providers.llm.none import NoneLLMProvider
from second_brain.providers.note_store.sqlite import SQLiteNoteStore
from second_brain.providers.pattern_store.sqlite import SQLitePatternStore


@pytest.fixture
def registered_builtins():
    """Register built-in providers without relying on installed entry points"""
    from second_brain.providers import plugin_loader

    plugin_loader.register_provider("llm", "none", NoneLLMProvider)
    plugin_loader.register_provider("note_store", "sqlite", SQLiteNoteStore)
    plugin_loader.register_provider("pattern_store", "sqlite", SQLitePatternStore)


def test_providers_built_from_settings(test_settings, registered_builtins):
    brain = SecondBrain(config=test_settings)

    assert isinstance(brain.note_store, SQLiteNoteStore)
    assert isinstance(brain.pattern_store, SQLitePatternStore)
    assert isinstance(brain.llm_provider, NoneLLMProvider)


def test_injected_providers_used(test_settings, note_store, pattern_store, mock_llm_provider):
    brain = SecondBrain(config=test_settings, note_store=note_store, pattern_store=pattern_store, llm=mock_llm_provider)

    assert brain.observer.note_store is note_store
    assert brain.observer.narrator.llm is mock_llm_provider
    assert brain.scheduler.observer is brain.observer


def test_single_observer_per_brain(test_settings, note_store, pattern_store, mock_llm_provider):
    brain = SecondBrain(config=test_settings, note_store=note_store, pattern_store=pattern_store, llm=mock_llm_provider)

    assert brain.observer is brain.observer


def test_get_llm_auto_is_configured_provider(test_settings, mock_llm_provider):
    brain = SecondBrain(config=test_settings, llm=mock_llm_provider)

    assert brain.get_llm(None) is mock_llm_provider
    assert brain.get_llm("auto") is mock_llm_provider


def test_get_llm_named_is_cached(test_settings, mock_llm_provider):
    brain = SecondBrain(config=test_settings, llm=mock_llm_provider)
    created = MagicMock()

    with patch("second_brain.brain.LLMProviderFactory.create", return_value=created) as create:
        assert brain.get_llm("ollama") is created
        assert brain.get_llm("ollama") is created

    create.assert_called_once_with(test_settings, name="ollama")


def test_scheduler_intervals_from_settings(test_settings, note_store, pattern_store, mock_llm_provider):
    test_settings.pattern_interval_hours = 2
    test_settings.pattern_min_gap_hours = 1
    brain = SecondBrain(config=test_settings, note_store=note_store, pattern_store=pattern_store, llm=mock_llm_provider)

    assert brain.scheduler.interval_seconds == 7200
    assert brain.scheduler.min_gap_seconds == 3600


def test_timezone_from_settings(test_settings):
    assert SecondBrain(config=test_settings).timezone is None

    test_settings.timeline_timezone = "UTC"
    assert SecondBrain(config=test_settings).timezone.utcoffset(None) == timezone.utc.utcoffset(None)


def test_get_brain_is_singleton(monkeypatch):
    monkeypatch.setattr(brain_module, "_brain", None)

    assert get_brain() is get_brain()
