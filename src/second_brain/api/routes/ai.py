"""AI helper endpoints: summarize, auto-tag and chat

The optional X-AI-Provider header picks "gemini", "ollama" or "auto" (the
configured provider).
"""

import logging

from fastapi import APIRouter, Header, HTTPException

from second_brain.brain import get_brain
from second_brain.models.notes import AutoTagRequest, ChatRequest, SummarizeRequest
from second_brain.providers.base import ProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai")


@router.post("/summarize")
def summarize(request: SummarizeRequest, x_ai_provider: str | None = Header(None)):
    try:
        summary = get_brain().notes.summarize(
            request.content, note_id=request.itemId, provider=x_ai_provider
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        logger.error(f"Summarize error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"summary": summary}


@router.post("/auto-tag")
def auto_tag(request: AutoTagRequest, x_ai_provider: str | None = Header(None)):
    try:
        tags = get_brain().notes.generate_tags(
            request.title, request.content, note_id=request.itemId, provider=x_ai_provider
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        logger.error(f"Auto-tag error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"tags": tags}


@router.post("/chat")
def chat(request: ChatRequest, x_ai_provider: str | None = Header(None)):
    messages = [message.model_dump() for message in request.messages or []]
    try:
        response = get_brain().notes.chat(messages, provider=x_ai_provider)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        logger.error(f"Chat error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"response": response}
