"""Pattern observer endpoints: run now, latest insights, run status, timeline"""

import logging

from fastapi import APIRouter, HTTPException

from second_brain.api.serializers import insight_to_json, iso, run_to_json
from second_brain.brain import get_brain
from second_brain.patterns.observer import AnalysisInProgressError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai/pattern-observer")


@router.post("/run")
def run_analysis():
    """
    Run the pattern analysis now and wait for it to finish.

    Declared sync so FastAPI runs it in its threadpool: narration makes
    blocking LLM calls.
    """
    try:
        result = get_brain().observer.run_analysis()
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Pattern Observer run error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e) or "Analysis failed")

    return {
        "success": True,
        "runId": result.run_id,
        "status": result.status.value,
        "totalNotes": result.total_notes,
        "themesFound": result.themes_found,
    }


@router.get("/insights")
async def get_insights():
    """Insights of the latest completed run with their related notes"""
    try:
        latest = get_brain().queries.get_latest_insights()
    except Exception as e:
        logger.error(f"Pattern Observer insights error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch insights")

    if latest is None:
        return {
            "insights": [],
            "message": "No analysis has been completed yet. Run the analyzer first.",
        }

    return {
        "runId": latest.run.id,
        "completedAt": iso(latest.run.completed_at),
        "totalNotes": latest.run.total_notes,
        "themesFound": latest.run.themes_found,
        "insights": [insight_to_json(insight) for insight in latest.insights],
    }


@router.get("/status")
async def get_status():
    """Status of the most recently started run"""
    try:
        run = get_brain().queries.get_status()
    except Exception as e:
        logger.error(f"Pattern Observer status error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch status")

    if run is None:
        return {"hasRun": False, "message": "No analysis has been run yet."}

    return {"hasRun": True, **run_to_json(run)}


@router.get("/timeline")
async def get_timeline():
    """Weekly tag histogram computed from the current notes"""
    try:
        timeline = get_brain().queries.get_timeline()
    except Exception as e:
        logger.error(f"Pattern Observer timeline error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to build timeline")

    return {"timeline": [entry.to_dict() for entry in timeline]}
