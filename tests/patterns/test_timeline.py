"""Tests for the weekly timeline builder"""

from datetime import date, datetime, timedelta, timezone

from second_brain.patterns.timeline import build_timeline, week_start
from second_brain.types import Note


def _note(created_at, tags, id="n"):
    return Note(id=id, title=id, content="", tags=tags, created_at=created_at, updated_at=created_at)


class TestWeekStart:

    def test_sunday_is_its_own_week_start(self):
        assert week_start(date(2024, 6, 9)) == date(2024, 6, 9)

    def test_saturday_belongs_to_previous_sunday(self):
        assert week_start(date(2024, 6, 15)) == date(2024, 6, 9)

    def test_monday(self):
        assert week_start(date(2024, 6, 10)) == date(2024, 6, 9)


class TestBuildTimeline:

    def test_empty(self):
        assert build_timeline([]) == []

    def test_single_week_histogram(self):
        utc = timezone.utc
        notes = [
            _note(datetime(2024, 6, 10, 9, tzinfo=utc), ["Rust"], "a"),
            _note(datetime(2024, 6, 12, 9, tzinfo=utc), ["rust", "go"], "b"),
            _note(datetime(2024, 6, 13, 9, tzinfo=utc), [], "c"),
        ]

        timeline = build_timeline(notes, tz=utc)

        assert len(timeline) == 1
        entry = timeline[0]
        assert entry.week_start == "2024-06-09"
        assert entry.week_end == "2024-06-15"
        assert entry.tags == {"rust": 2, "go": 1}
        assert entry.total_notes == 3

    def test_empty_weeks_omitted_and_sorted(self):
        utc = timezone.utc
        notes = [
            _note(datetime(2024, 6, 12, tzinfo=utc), ["a"], "late"),
            _note(datetime(2024, 5, 1, tzinfo=utc), ["a"], "early"),
        ]

        timeline = build_timeline(notes, tz=utc)

        assert [e.week_start for e in timeline] == ["2024-04-28", "2024-06-09"]

    def test_week_starts_strictly_increasing(self):
        utc = timezone.utc
        base = datetime(2024, 1, 3, tzinfo=utc)
        notes = [_note(base + timedelta(days=d), ["x"], f"n{d}") for d in (40, 0, 13, 13, 90, 2)]

        starts = [entry.week_start for entry in build_timeline(notes, tz=utc)]

        assert starts == sorted(set(starts))

    def test_week_end_is_six_days_after_start(self):
        utc = timezone.utc
        entry = build_timeline([_note(datetime(2024, 12, 30, tzinfo=utc), ["x"])], tz=utc)[0]

        start = date.fromisoformat(entry.week_start)
        assert date.fromisoformat(entry.week_end) - start == timedelta(days=6)

    def test_boundaries_use_given_timezone(self):
        """Saturday 23:30 at UTC-4 is already Sunday in UTC"""
        created = datetime(2024, 6, 16, 3, 30, tzinfo=timezone.utc)
        note = _note(created, ["x"])

        assert build_timeline([note], tz=timezone.utc)[0].week_start == "2024-06-16"
        assert build_timeline([note], tz=timezone(timedelta(hours=-4)))[0].week_start == "2024-06-09"

    def test_to_dict_is_camel_case(self):
        entry = build_timeline([_note(datetime(2024, 6, 12, tzinfo=timezone.utc), ["x"])], tz=timezone.utc)[0]

        assert entry.to_dict() == {
            "weekStart": "2024-06-09",
            "weekEnd": "2024-06-15",
            "tags": {"x": 1},
            "totalNotes": 1,
        }
