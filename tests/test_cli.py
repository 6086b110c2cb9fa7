"""Tests for the admin CLI"""

import json
from datetime import timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from second_brain.brain import SecondBrain
from second_brain.cli.main import cli
from second_brain.providers.llm.none import NoneLLMProvider
from second_brain.types import utcnow


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def brain(test_settings, note_store, pattern_store, mock_llm_provider):
    brain = SecondBrain(
        config=test_settings, note_store=note_store, pattern_store=pattern_store, llm=mock_llm_provider
    )
    with patch("second_brain.cli.patterns_cmd.get_brain", return_value=brain), \
            patch("second_brain.cli.patterns_cmd.console", Console(width=200)):
        yield brain


def _seed(note_store, tags, days_ago=0, title="Untitled"):
    return note_store.create(
        title=title, content="content", tags=tags, created_at=utcnow() - timedelta(days=days_ago)
    )


def test_run_analysis_prints_insights(runner, brain, note_store):
    _seed(note_store, ["rust"], title="Ownership")
    _seed(note_store, ["rust"], title="Lifetimes")

    result = runner.invoke(cli, ["run-analysis"])

    assert result.exit_code == 0
    assert "completed" in result.output
    assert "Themes found: 2" in result.output
    assert "rust" in result.output


def test_run_analysis_in_progress_exits_nonzero(runner, brain):
    brain.observer._lock.acquire()
    try:
        result = runner.invoke(cli, ["run-analysis"])
    finally:
        brain.observer._lock.release()

    assert result.exit_code == 1
    assert "already in progress" in result.output


def test_status_without_runs(runner, brain):
    result = runner.invoke(cli, ["status"])

    assert result.exit_code == 0
    assert "No analysis has been run yet." in result.output


def test_status_lists_runs(runner, brain, pattern_store):
    run = pattern_store.create_run()
    pattern_store.fail_run(run.id, "boom")

    result = runner.invoke(cli, ["status", "-n", "5"])

    assert result.exit_code == 0
    assert "failed" in result.output


def test_insights_before_first_run(runner, brain):
    result = runner.invoke(cli, ["insights"])

    assert "No analysis has been completed yet" in result.output


def test_insights_after_run(runner, brain, note_store, mock_llm_provider):
    mock_llm_provider.generate.return_value = "Rust is everywhere lately."
    _seed(note_store, ["rust"], title="Ownership")
    _seed(note_store, ["rust"], title="Lifetimes")
    brain.observer.run_analysis()

    result = runner.invoke(cli, ["insights"])

    assert result.exit_code == 0
    assert "Rust is everywhere lately." in result.output
    assert "Ownership" in result.output


def test_timeline_json(runner, brain, note_store):
    _seed(note_store, ["rust", "go"])

    result = runner.invoke(cli, ["timeline", "--json"])

    timeline = json.loads(result.output)["timeline"]
    assert timeline[0]["tags"] == {"rust": 1, "go": 1}
    assert timeline[0]["totalNotes"] == 1


def test_providers_lists_discovered(runner):
    from second_brain.providers import plugin_loader

    plugin_loader.register_provider("llm", "none", NoneLLMProvider)

    result = runner.invoke(cli, ["providers"])

    assert result.exit_code == 0
    assert "LLM Providers" in result.output
    assert "none" in result.output
