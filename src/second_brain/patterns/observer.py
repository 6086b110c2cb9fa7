"""Pattern observer: one end-to-end analysis run over the note collection.

A run snapshots every note, looks for tags that recur at least twice within
each period (past week, past month, all time), asks the narrator for one
sentence per theme and persists the result as an AnalysisRun with its
ThemeInsight rows. The run is marked failed, and the error re-raised, if
anything after its creation goes wrong.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, tzinfo

from second_brain.patterns.grouping import group_by_tags, note_themes
from second_brain.patterns.narrator import InsightNarrator
from second_brain.patterns.timeline import build_timeline
from second_brain.providers.base import NoteStoreProvider, PatternStoreProvider
from second_brain.types import (
    PERIOD_PRIORITY,
    AnalysisResult,
    Note,
    Period,
    RunStatus,
    ThemeGroup,
    ThemeInsight,
    utcnow,
)

logger = logging.getLogger(__name__)

MIN_THEME_COUNT = 2
MAX_THEMES_PER_PERIOD = 10
# Notes older than this are attached to every insight of their theme
RELATED_HISTORY_DAYS = 30


class AnalysisInProgressError(RuntimeError):
    """Raised when a second analysis is triggered while one is running"""


class PatternObserver:
    """Runs the recurring-theme analysis.

    At most one run executes at a time per observer; a concurrent trigger
    fails fast with AnalysisInProgressError instead of queueing.
    """

    def __init__(
        self,
        note_store: NoteStoreProvider,
        pattern_store: PatternStoreProvider,
        narrator: InsightNarrator,
        now: Callable[[], datetime] = utcnow,
        tz: tzinfo | None = None
    ):
        self.note_store = note_store
        self.pattern_store = pattern_store
        self.narrator = narrator
        self.now = now
        self.tz = tz
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run_analysis(self) -> AnalysisResult:
        """Execute one analysis run and return its outcome.

        Raises:
            AnalysisInProgressError: If another run is in progress (no run is created)
            Exception: Whatever failed the run, after the run was marked failed
        """
        if not self._lock.acquire(blocking=False):
            raise AnalysisInProgressError("A pattern analysis is already in progress")
        try:
            return self._run()
        finally:
            self._lock.release()

    def _run(self) -> AnalysisResult:
        run = self.pattern_store.create_run()
        logger.info(f"Pattern analysis started: run {run.id}")

        try:
            notes = self.note_store.list()

            if not notes:
                self.pattern_store.complete_run(run.id, total_notes=0, themes_found=0)
                logger.info(f"Pattern analysis {run.id} completed: no notes")
                return AnalysisResult(
                    run_id=run.id,
                    status=RunStatus.COMPLETED,
                    total_notes=0,
                    themes_found=0,
                )

            candidates = self._collect_insights(notes, self.now())
            timeline = build_timeline(notes, tz=self.tz)
            stored = self.pattern_store.add_insights(run.id, candidates)
            self.pattern_store.complete_run(run.id, total_notes=len(notes), themes_found=len(stored))
        except Exception as e:
            logger.error(f"Pattern analysis {run.id} failed: {e}", exc_info=True)
            # fail_run also drops insights already stored by add_insights
            try:
                self.pattern_store.fail_run(run.id, str(e))
            except Exception as mark_error:
                logger.error(f"Could not mark run {run.id} as failed: {mark_error}")
            raise

        logger.info(
            f"Pattern analysis {run.id} completed: {len(notes)} notes, {len(stored)} themes"
        )
        return AnalysisResult(
            run_id=run.id,
            status=RunStatus.COMPLETED,
            total_notes=len(notes),
            themes_found=len(stored),
            insights=stored,
            timeline=timeline,
        )

    def _collect_insights(self, notes: list[Note], now: datetime) -> list[ThemeInsight]:
        """Narrate the recurring themes of every period, narrowest period first."""
        history_cutoff = now - timedelta(days=RELATED_HISTORY_DAYS)
        first_seen: dict[str, Period] = {}
        candidates: list[ThemeInsight] = []

        for period in PERIOD_PRIORITY:
            in_period = self._notes_in_period(notes, period, now)
            if not in_period:
                continue

            groups = group_by_tags(in_period)
            recurring = sorted(
                (group for group in groups.values() if group.count >= MIN_THEME_COUNT),
                key=lambda group: -group.count
            )[:MAX_THEMES_PER_PERIOD]
            logger.info(
                f"{period.value}: {len(in_period)} notes, {len(groups)} tags, "
                f"{len(recurring)} recurring themes"
            )

            for group in recurring:
                earlier = first_seen.get(group.tag)
                if period.defers_to_narrower and earlier is not None and earlier.narrower_than(period):
                    logger.debug(f"Skipping {period.value} theme '{group.tag}': already reported for {earlier.value}")
                    continue

                candidates.append(ThemeInsight(
                    theme=group.tag,
                    count=group.count,
                    insight=self.narrator.narrate(group.tag, group.count, group.titles, period),
                    related_note_ids=self._related_note_ids(group, notes, history_cutoff),
                    period=period,
                ))
                first_seen.setdefault(group.tag, period)

        return candidates

    @staticmethod
    def _notes_in_period(notes: list[Note], period: Period, now: datetime) -> list[Note]:
        if period.days is None:
            return list(notes)
        cutoff = now - timedelta(days=period.days)
        return [note for note in notes if note.created_at >= cutoff]

    @staticmethod
    def _related_note_ids(group: ThemeGroup, notes: list[Note], history_cutoff: datetime) -> list[str]:
        """In-period members first, then older notes of the same theme, without duplicates."""
        related = list(dict.fromkeys(group.note_ids))
        seen = set(related)
        for note in notes:
            if note.id in seen or note.created_at >= history_cutoff:
                continue
            if group.tag in note_themes(note):
                related.append(note.id)
                seen.add(note.id)
        return related
