"""Knowledge endpoints: note CRUD and the public keyword query"""

import logging

from fastapi import APIRouter, HTTPException, Query

from second_brain.api.serializers import note_to_json
from second_brain.brain import get_brain
from second_brain.models.notes import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/knowledge")
async def list_notes():
    """All notes, newest first"""
    try:
        notes = get_brain().notes.list_notes()
    except Exception as e:
        logger.error(f"GET /api/knowledge error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch knowledge")

    return [note_to_json(note) for note in notes]


@router.post("/knowledge")
def create_note(request: NoteCreate):
    """
    Create a note.

    A one-sentence summary is generated, and tags too when none are given.
    AI failures never block the save.
    """
    try:
        note = get_brain().notes.create_note(
            title=request.title,
            content=request.content,
            type=request.type,
            tags=request.tags,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /api/knowledge error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create knowledge")

    return note_to_json(note)


@router.get("/knowledge/{note_id}")
async def get_note(note_id: str):
    note = get_brain().notes.get_note(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note_to_json(note)


@router.put("/knowledge/{note_id}")
async def update_note(note_id: str, request: NoteUpdate):
    try:
        note = get_brain().notes.update_note(
            note_id,
            title=request.title,
            content=request.content,
            type=request.type,
            tags=request.tags,
            summary=request.summary,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note_to_json(note)


@router.delete("/knowledge/{note_id}")
async def delete_note(note_id: str):
    if not get_brain().notes.delete_note(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return {"success": True}


@router.get("/public/brain/query")
async def public_query(q: str = Query("", description="Text to look for in titles and content")):
    """Keyword lookup over titles and content (first 5 matches)"""
    try:
        notes = get_brain().notes.search(q)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "query": q,
        "results": [note_to_json(note) for note in notes],
        "count": len(notes),
    }
