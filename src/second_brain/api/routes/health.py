"""Health check endpoints"""

import logging

from fastapi import APIRouter

from second_brain.brain import get_brain
from second_brain.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ping")
async def ping():
    """Lightweight connectivity check - no backend calls"""
    return {"ok": True}


@router.get("/health")
async def health_check():
    """Full health check - initializes providers and reports their names"""
    try:
        brain = get_brain()
        providers = {
            "llm": brain.llm_provider.get_name(),
            "llm_model": brain.llm_provider.get_default_model(),
            "note_store": brain.note_store.get_name(),
            "pattern_store": brain.pattern_store.get_name(),
        }

        return {
            "status": "healthy",
            "providers": providers,
            "scheduler": {
                "enabled": settings.pattern_scheduler_enabled,
                "started": brain.scheduler.started,
            },
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        # Don't expose detailed error messages to clients
        return {
            "status": "unhealthy",
            "error": "Service initialization failed"
        }
