"""JSON shapes of notes and pattern observer results (camelCase, ISO timestamps)"""

from datetime import datetime
from typing import Any

from second_brain.patterns.queries import HydratedInsight
from second_brain.types import AnalysisRun, Note


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def note_to_json(note: Note) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "type": note.type,
        "tags": note.tags,
        "summary": note.summary,
        "createdAt": iso(note.created_at),
        "updatedAt": iso(note.updated_at),
    }


def related_note_to_json(note: Note) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "tags": note.tags,
        "createdAt": iso(note.created_at),
        "type": note.type,
    }


def insight_to_json(hydrated: HydratedInsight) -> dict[str, Any]:
    insight = hydrated.insight
    return {
        "id": insight.id,
        "theme": insight.theme,
        "count": insight.count,
        "insight": insight.insight,
        "period": insight.period.value,
        "relatedNotes": [related_note_to_json(note) for note in hydrated.related_notes],
        "createdAt": iso(insight.created_at),
    }


def run_to_json(run: AnalysisRun) -> dict[str, Any]:
    return {
        "id": run.id,
        "status": run.status.value,
        "totalNotes": run.total_notes,
        "themesFound": run.themes_found,
        "error": run.error,
        "startedAt": iso(run.started_at),
        "completedAt": iso(run.completed_at),
    }
