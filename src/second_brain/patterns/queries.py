"""Read side of the pattern observer: latest insights, run status and timeline."""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo

from second_brain.patterns.timeline import build_timeline
from second_brain.providers.base import NoteStoreProvider, PatternStoreProvider
from second_brain.types import AnalysisRun, Note, ThemeInsight, TimelineEntry

logger = logging.getLogger(__name__)


@dataclass
class HydratedInsight:
    """A stored insight with its related notes loaded (newest first)."""

    insight: ThemeInsight
    related_notes: list[Note] = field(default_factory=list)


@dataclass
class LatestInsights:
    """The current run and its insights, highest count first."""

    run: AnalysisRun
    insights: list[HydratedInsight] = field(default_factory=list)


class PatternQueries:
    """Serves stored analysis results. Failed runs are never current."""

    def __init__(
        self,
        note_store: NoteStoreProvider,
        pattern_store: PatternStoreProvider,
        tz: tzinfo | None = None
    ):
        self.note_store = note_store
        self.pattern_store = pattern_store
        self.tz = tz

    def get_latest_insights(self) -> LatestInsights | None:
        """Insights of the most recently completed run, None if there is none"""
        run = self.pattern_store.get_latest_completed_run()
        if run is None:
            return None

        insights = [
            HydratedInsight(
                insight=insight,
                related_notes=self.note_store.get_many(insight.related_note_ids),
            )
            for insight in self.pattern_store.list_insights(run.id)
        ]
        return LatestInsights(run=run, insights=insights)

    def get_status(self) -> AnalysisRun | None:
        """The most recently started run of any status"""
        return self.pattern_store.get_latest_run()

    def get_timeline(self) -> list[TimelineEntry]:
        """Weekly tag histogram over the current notes (computed, never stored)"""
        return build_timeline(self.note_store.list(), tz=self.tz)
