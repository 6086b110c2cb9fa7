"""FastAPI application entry point"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from second_brain.api.routes import ai, health, knowledge, patterns
from second_brain.brain import get_brain
from second_brain.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Second Brain API",
    description="Personal knowledge base with a recurring-theme pattern observer",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error bodies are {"error": message} across the API
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


# Include routers
app.include_router(health.router, tags=["health"])  # /health, /ping
app.include_router(health.router, prefix="/api", tags=["health"])  # /api/health
app.include_router(knowledge.router, prefix="/api", tags=["knowledge"])
app.include_router(ai.router, prefix="/api", tags=["ai"])
app.include_router(patterns.router, prefix="/api", tags=["pattern-observer"])


@app.on_event("startup")
async def startup_event():
    """Start the pattern scheduler"""
    logger.info("Starting Second Brain API...")
    logger.info(f"LLM Provider: {settings.llm_provider}")
    logger.info(f"Database: {settings.database_path}")

    if not settings.pattern_scheduler_enabled:
        logger.info("Pattern scheduler disabled")
        return

    try:
        get_brain().scheduler.start()
    except Exception as e:
        logger.error(f"Failed to start pattern scheduler: {e}", exc_info=True)


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the pattern scheduler"""
    logger.info("Shutting down Second Brain API...")
    if settings.pattern_scheduler_enabled:
        await get_brain().scheduler.stop()
