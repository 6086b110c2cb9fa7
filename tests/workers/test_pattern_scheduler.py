"""Test the periodic pattern analysis scheduler."""
import asyncio
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from second_brain.patterns.observer import AnalysisInProgressError
from second_brain.types import AnalysisResult, AnalysisRun, RunStatus
from second_brain.workers.pattern_scheduler import PatternScheduler

NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


def _completed_run(hours_ago: float) -> AnalysisRun:
    completed = NOW - timedelta(hours=hours_ago)
    return AnalysisRun(
        id="run-1",
        status=RunStatus.COMPLETED,
        started_at=completed - timedelta(minutes=1),
        completed_at=completed,
    )


@pytest.fixture
def mock_observer():
    observer = MagicMock()
    observer.run_analysis.return_value = AnalysisResult(
        run_id="run-2", status=RunStatus.COMPLETED, total_notes=5, themes_found=1
    )
    return observer


@pytest.fixture
def mock_pattern_store():
    store = MagicMock()
    store.get_latest_completed_run.return_value = None
    return store


@pytest.fixture
def scheduler(mock_observer, mock_pattern_store):
    return PatternScheduler(
        mock_observer,
        mock_pattern_store,
        interval_seconds=0.01,
        min_gap_seconds=23 * 3600,
        startup_delay_seconds=0,
    )


class TestShouldRun:

    def test_no_completed_run(self, scheduler):
        assert scheduler.should_run(NOW) is True

    def test_recent_run_skips(self, scheduler, mock_pattern_store):
        mock_pattern_store.get_latest_completed_run.return_value = _completed_run(hours_ago=2)

        assert scheduler.should_run(NOW) is False

    def test_old_enough_run(self, scheduler, mock_pattern_store):
        mock_pattern_store.get_latest_completed_run.return_value = _completed_run(hours_ago=23)

        assert scheduler.should_run(NOW) is True

    def test_store_error_means_no_run(self, scheduler, mock_pattern_store):
        mock_pattern_store.get_latest_completed_run.side_effect = RuntimeError("locked")

        assert scheduler.should_run(NOW) is False


@pytest.mark.asyncio
async def test_tick_runs_analysis(scheduler, mock_observer):
    result = await scheduler.tick()

    assert result.run_id == "run-2"
    mock_observer.run_analysis.assert_called_once()


@pytest.mark.asyncio
async def test_tick_checks_gap_in_worker_thread(scheduler, mock_pattern_store):
    loop_thread = threading.get_ident()
    seen = {}

    def latest_completed_run():
        seen["thread"] = threading.get_ident()
        return None

    mock_pattern_store.get_latest_completed_run.side_effect = latest_completed_run

    await scheduler.tick()

    assert seen["thread"] != loop_thread


@pytest.mark.asyncio
async def test_tick_skips_when_recent(scheduler, mock_observer, mock_pattern_store):
    mock_pattern_store.get_latest_completed_run.return_value = AnalysisRun(
        id="run-1",
        status=RunStatus.COMPLETED,
        started_at=datetime.now(timezone.utc),
        completed_at=datetime.now(timezone.utc),
    )

    assert await scheduler.tick() is None
    mock_observer.run_analysis.assert_not_called()


@pytest.mark.asyncio
async def test_tick_swallows_failures(scheduler, mock_observer):
    mock_observer.run_analysis.side_effect = RuntimeError("boom")

    assert await scheduler.tick() is None


@pytest.mark.asyncio
async def test_tick_swallows_run_in_progress(scheduler, mock_observer):
    mock_observer.run_analysis.side_effect = AnalysisInProgressError("busy")

    assert await scheduler.tick() is None


@pytest.mark.asyncio
async def test_start_is_idempotent_and_stop_cancels(scheduler, mock_observer):
    assert scheduler.started is False

    assert scheduler.start() is True
    assert scheduler.start() is False
    assert scheduler.started is True

    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert scheduler.started is False
    assert mock_observer.run_analysis.call_count >= 1


@pytest.mark.asyncio
async def test_first_tick_waits_for_startup_delay(mock_observer, mock_pattern_store):
    scheduler = PatternScheduler(
        mock_observer, mock_pattern_store, interval_seconds=3600, startup_delay_seconds=3600
    )

    scheduler.start()
    await asyncio.sleep(0.02)
    await scheduler.stop()

    mock_observer.run_analysis.assert_not_called()


@pytest.mark.asyncio
async def test_stop_without_start_is_noop(scheduler):
    await scheduler.stop()

    assert scheduler.started is False


def test_start_requires_running_loop(scheduler):
    with pytest.raises(RuntimeError):
        scheduler.start()
