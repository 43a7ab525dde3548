"""Application entry point for the Portal Hub API."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import init_db
from .routers import (
    auth_router,
    collections_router,
    feeds_router,
    follows_router,
    groups_router,
    notifications_router,
    posts_router,
    profiles_router,
    projects_router,
    stories_router,
    uploads_router,
)
from .services import change_feed, run_migrations_if_needed

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

app = FastAPI(title=APP_NAME, version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(follows_router)
app.include_router(posts_router)
app.include_router(feeds_router)
app.include_router(stories_router)
app.include_router(collections_router)
app.include_router(groups_router)
app.include_router(projects_router)
app.include_router(notifications_router)
app.include_router(uploads_router)


@app.on_event("startup")
async def _startup() -> None:
    """Bring the schema up to date before serving."""

    try:
        migrated = run_migrations_if_needed(database_url=settings.database_url)
        init_db()
    except Exception:  # pragma: no cover - best effort logging
        logger.exception("Database initialisation failed")
        raise
    logger.info("%s %s ready (migrations applied: %s)", APP_NAME, API_VERSION, migrated)


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, object]:
    return {
        "status": "ok",
        "realtime_subscribers": change_feed.total_subscribers(),
    }
