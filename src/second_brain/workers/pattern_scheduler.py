"""Background scheduler that runs the pattern analysis periodically."""
import asyncio
import logging
from datetime import datetime, timedelta

from second_brain.patterns.observer import PatternObserver
from second_brain.providers.base import PatternStoreProvider
from second_brain.types import AnalysisResult, utcnow

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 24 * 60 * 60
DEFAULT_MIN_GAP_SECONDS = 23 * 60 * 60
DEFAULT_STARTUP_DELAY_SECONDS = 10


class PatternScheduler:
    """Triggers PatternObserver.run_analysis() at most once per interval.

    The first tick happens after a short startup delay, then every
    interval. Each tick skips the run when the latest completed run is more
    recent than the minimum gap, so restarts do not cause extra runs.
    """

    def __init__(
        self,
        observer: PatternObserver,
        pattern_store: PatternStoreProvider,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        min_gap_seconds: float = DEFAULT_MIN_GAP_SECONDS,
        startup_delay_seconds: float = DEFAULT_STARTUP_DELAY_SECONDS
    ):
        self.observer = observer
        self.pattern_store = pattern_store
        self.interval_seconds = interval_seconds
        self.min_gap_seconds = min_gap_seconds
        self.startup_delay_seconds = startup_delay_seconds
        self._task: asyncio.Task | None = None

    @property
    def started(self) -> bool:
        return self._task is not None

    def should_run(self, now: datetime | None = None) -> bool:
        """True when no completed run exists or the last one is old enough."""
        try:
            latest = self.pattern_store.get_latest_completed_run()
        except Exception:
            logger.error("Could not check last pattern analysis run", exc_info=True)
            return False

        if latest is None or latest.completed_at is None:
            return True

        elapsed = (now or utcnow()) - latest.completed_at
        if elapsed < timedelta(seconds=self.min_gap_seconds):
            logger.info(
                f"Skipping pattern analysis: last run completed "
                f"{elapsed.total_seconds() / 3600:.1f}h ago"
            )
            return False
        return True

    async def tick(self) -> AnalysisResult | None:
        """Run the analysis once if due. Never raises."""
        # The gap check queries the pattern store, so it stays off the event loop too
        if not await asyncio.to_thread(self.should_run):
            return None

        try:
            result = await asyncio.to_thread(self.observer.run_analysis)
        except Exception as e:
            logger.error(f"Scheduled pattern analysis failed: {e}", exc_info=True)
            return None

        logger.info(
            f"Scheduled pattern analysis completed: run {result.run_id}, "
            f"{result.themes_found} themes"
        )
        return result

    async def _loop(self):
        await asyncio.sleep(self.startup_delay_seconds)
        while True:
            await self.tick()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> bool:
        """Schedule the loop on the running event loop; False if already started."""
        if self._task is not None:
            return False

        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info(
            f"Pattern scheduler started: first run in {self.startup_delay_seconds:.0f}s, "
            f"then every {self.interval_seconds / 3600:.1f}h"
        )
        return True

    async def stop(self):
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Pattern scheduler stopped")
