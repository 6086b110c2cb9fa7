"""Theme grouping: partition notes into per-tag groups."""

from collections.abc import Iterable

from second_brain.types import Note, ThemeGroup


def normalize_tag(tag: str) -> str:
    """Canonical form of a tag ("  AI " -> "ai"); empty string means no tag."""
    return tag.strip().lower()


def note_themes(note: Note) -> list[str]:
    """Distinct normalized tags of a note, in the order they were entered."""
    themes: list[str] = []
    for tag in note.tags:
        theme = normalize_tag(tag)
        if theme and theme not in themes:
            themes.append(theme)
    return themes


def group_by_tags(notes: Iterable[Note]) -> dict[str, ThemeGroup]:
    """Group notes by normalized tag.

    A note with several tags joins several groups; a note carrying the same
    tag twice ("AI" and " ai ") counts once. Groups keep the input order of
    their notes and are returned unsorted.
    """
    groups: dict[str, ThemeGroup] = {}

    for note in notes:
        for theme in note_themes(note):
            group = groups.get(theme)
            if group is None:
                groups[theme] = ThemeGroup(
                    tag=theme,
                    note_ids=[note.id],
                    titles=[note.title],
                    count=1,
                    oldest_date=note.created_at,
                    newest_date=note.created_at,
                )
                continue

            group.note_ids.append(note.id)
            group.titles.append(note.title)
            group.count += 1
            if note.created_at < group.oldest_date:
                group.oldest_date = note.created_at
            if note.created_at > group.newest_date:
                group.newest_date = note.created_at

    return groups
