"""Type definitions shared by the note store, the pattern observer and the API."""
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    """Lifecycle of an analysis run: RUNNING -> COMPLETED | FAILED."""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RunStatus.RUNNING


class Period(str, Enum):
    """Analysis windows, listed from narrowest to widest."""
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    ALL_TIME = "all_time"

    @property
    def days(self) -> int | None:
        """Window length in days, None for all_time."""
        return {"last_7_days": 7, "last_30_days": 30}.get(self.value)

    @property
    def label(self) -> str:
        """Phrase used when asking the LLM about this period."""
        return {
            "last_7_days": "the past week",
            "last_30_days": "the past month",
            "all_time": "all time",
        }[self.value]

    @property
    def phrase(self) -> str:
        """Phrase used in the templated fallback sentence."""
        return {
            "last_7_days": "in the past week",
            "last_30_days": "in the past month",
            "all_time": "across all your notes",
        }[self.value]

    @property
    def defers_to_narrower(self) -> bool:
        """Whether a theme already reported by a narrower period is skipped in this one."""
        return self is Period.ALL_TIME

    def narrower_than(self, other: "Period") -> bool:
        return PERIOD_PRIORITY.index(self) < PERIOD_PRIORITY.index(other)


# Analysis order; narrower periods come first and win over all_time restatements
PERIOD_PRIORITY: tuple[Period, ...] = (Period.LAST_7_DAYS, Period.LAST_30_DAYS, Period.ALL_TIME)


@dataclass
class Note:
    """A captured thought. Owned by the note store."""

    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    type: str = "note"
    summary: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ThemeGroup:
    """All notes of one period that share a normalized tag."""

    tag: str
    note_ids: list[str]
    titles: list[str]
    count: int
    oldest_date: datetime
    newest_date: datetime


@dataclass
class TimelineEntry:
    """Tag histogram of the notes created in one calendar week (Sunday start)."""

    week_start: str
    week_end: str
    tags: dict[str, int]
    total_notes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start,
            "weekEnd": self.week_end,
            "tags": dict(self.tags),
            "totalNotes": self.total_notes,
        }


@dataclass
class ThemeInsight:
    """One recurring-theme finding within a run."""

    theme: str
    count: int
    insight: str
    related_note_ids: list[str]
    period: Period
    run_id: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["period"] = self.period.value
        return result


@dataclass
class AnalysisRun:
    """One execution of the pattern analysis."""

    id: str
    status: RunStatus
    started_at: datetime
    total_notes: int = 0
    themes_found: int = 0
    error: str | None = None
    completed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["status"] = self.status.value
        return result


@dataclass
class AnalysisResult:
    """What run_analysis() hands back to its caller."""

    run_id: str
    status: RunStatus
    total_notes: int
    themes_found: int
    insights: list[ThemeInsight] = field(default_factory=list)
    timeline: list[TimelineEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "total_notes": self.total_notes,
            "themes_found": self.themes_found,
            "insights": [insight.to_dict() for insight in self.insights],
            "timeline": [entry.to_dict() for entry in self.timeline],
        }
