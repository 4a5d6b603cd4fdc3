"""
ProTrack - Main Application Entry Point

FastAPI application serving the project status page, AI summaries and
cache refresh over a Google Sheets backed entity store.
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from .database.exceptions import StoreError
from .integrations.sheets import get_sheets_integration
from .web.routes import router as api_router, cache_status
from .web.state import AppState, get_app_state

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    logger.info("Starting ProTrack...")

    state = get_app_state()
    try:
        await get_sheets_integration().initialize()
        await state.loader.load()
        logger.info("Users and clients loaded; project data loading in background")
    except StoreError as e:
        logger.error(f"Initial load failed: {e}")
        state.last_error = str(e)

    yield

    logger.info("Shutting down ProTrack...")
    try:
        await state.loader.wait_secondary()
    except Exception as e:
        logger.warning(f"Background load did not finish cleanly: {e}")
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="ProTrack",
    description="Project tracking over a Google Sheets workbook",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint - service info."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check(state: AppState = Depends(get_app_state)):
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "services": {
            "sheets": bool(settings.google_sheet_id),
            "summarizer": bool(settings.deepseek_api_key),
        },
        "cache": cache_status(state),
    }


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Store failures become a readable 502 instead of a stack trace."""
    logger.error(f"Store error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={"error": "Spreadsheet operation failed", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "protrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
