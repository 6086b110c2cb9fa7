"""Tests for Settings parsing"""

import pytest
from pydantic import ValidationError

from second_brain.config import Settings


def test_defaults():
    settings = Settings(_env_file=None, llm_provider="fallback", llm_fallback_chain="gemini,ollama")

    assert settings.pattern_interval_hours == 24.0
    assert settings.pattern_min_gap_hours == 23.0
    assert settings.get_fallback_chain() == ["gemini", "ollama"]
    assert settings.get_llm_model() == settings.gemini_model


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PATTERN_INTERVAL_HOURS", "6")
    monkeypatch.setenv("LLM_FALLBACK_CHAIN", " ollama , ,gemini ")
    monkeypatch.setenv("TIMELINE_TIMEZONE", "Europe/Berlin")

    settings = Settings(_env_file=None)

    assert settings.pattern_interval_hours == 6.0
    assert settings.get_fallback_chain() == ["ollama", "gemini"]
    assert settings.timeline_timezone == "Europe/Berlin"


def test_cors_origins_split():
    settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")

    assert settings.get_cors_origins() == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("provider,expected", [("ollama", "llama3"), ("none", "")])
def test_llm_model_per_provider(provider, expected):
    assert Settings(_env_file=None, llm_provider=provider, ollama_model="llama3").get_llm_model() == expected


def test_invalid_interval_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, pattern_interval_hours=0)
