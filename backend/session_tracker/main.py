"""Session Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SessionTrackerError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan (remote backend only)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from session_tracker.api.error_handlers import register_error_handlers
from session_tracker.api.routes import health, session_entries
from session_tracker.config import get_settings
from session_tracker.infrastructure import database
from session_tracker.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.storage_backend == "remote":
        database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    logger.info(f"Session Tracker API started ({settings.storage_backend} storage)")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Session Tracker API shutting down")


app = FastAPI(
    title="Session Tracker API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(session_entries.router)

register_error_handlers(app)
