"""Weekly tag histograms for the activity timeline."""

from collections.abc import Iterable
from datetime import date, timedelta, tzinfo

from second_brain.patterns.grouping import note_themes
from second_brain.types import Note, TimelineEntry


def week_start(day: date) -> date:
    """Most recent Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def build_timeline(notes: Iterable[Note], tz: tzinfo | None = None) -> list[TimelineEntry]:
    """Bucket notes into Sunday-start weeks with a per-tag count.

    Week boundaries are local midnights in `tz` (the process's local zone
    when None). Only weeks containing at least one note are returned,
    oldest first. `total_notes` counts every note of the week, tagged or not.
    """
    weeks: dict[date, TimelineEntry] = {}

    for note in sorted(notes, key=lambda n: n.created_at):
        start = week_start(note.created_at.astimezone(tz).date())
        entry = weeks.get(start)
        if entry is None:
            entry = weeks[start] = TimelineEntry(
                week_start=start.isoformat(),
                week_end=(start + timedelta(days=6)).isoformat(),
                tags={},
                total_notes=0,
            )

        entry.total_notes += 1
        for theme in note_themes(note):
            entry.tags[theme] = entry.tags.get(theme, 0) + 1

    return sorted(weeks.values(), key=lambda entry: entry.week_start)
