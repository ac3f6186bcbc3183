"""
TV Catalog API

Read-only REST API over a catalog of TV shows, seasons, episodes,
characters and actors. Every list endpoint is keyset-paginated.

Run with: uvicorn tvcatalog.main:app --port 3000 --reload
"""
import os
import sqlite3
import time as _time_module
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configure structured logging FIRST (before any logger calls)
from .middleware.structlog_config import configure as configure_logging
configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

import structlog

from .dependencies import get_db, init_schema, verify_database_exists
from .middleware import RequestLoggingMiddleware, register_error_handlers
from .routers import (
    actors_router,
    shows_router,
    seasons_router,
    episodes_router,
    characters_router,
)

logger = structlog.get_logger("tvcatalog.api")

# Track server start time for uptime reporting
_server_start_time = _time_module.time()


def _startup_checks():
    """Ensure the schema exists and report the database location."""
    from .dependencies import DB_PATH

    if not verify_database_exists():
        logger.warning("database_missing", path=str(DB_PATH), action="creating empty catalog")
    try:
        with get_db() as conn:
            init_schema(conn)
        logger.info("startup_checks_passed", database=str(DB_PATH))
    except sqlite3.Error as e:
        logger.error("startup_check_failed", check="schema", path=str(DB_PATH), error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: make sure the schema is in place."""
    _startup_checks()
    yield
    logger.info("Shutting down.")


# API metadata
API_TITLE = "TV Catalog API"
API_DESCRIPTION = """
Shows, seasons, episodes, characters and actors.

## Pagination

Every list endpoint accepts:

- **limit** - page size (positive integer)
- **offset** - rows to skip (requires `limit`, cannot be combined with `page_info`)
- **page_info** - opaque continuation token taken from a `Link` header

Responses carry `Link: <url>; rel="previous", <url>; rel="next"` when
neighbouring pages exist.

## Embedding

- **include** - comma separated dotted relations, e.g. `episodes.characters.actor`
  on shows, `characters` on episodes, `actor` on characters. Embedded lists are
  not paginated.
"""
API_VERSION = "1.0.0"

_docs_enabled = os.environ.get("ENABLE_DOCS", "true").lower() == "true"
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    lifespan=lifespan,
)

# Register global error handlers
register_error_handlers(app)

# Request logging middleware; CORS is added after it and so runs outermost
app.add_middleware(RequestLoggingMiddleware)

cors_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
    expose_headers=["Link", "X-Request-ID"],
)

# Include routers
app.include_router(actors_router, prefix="/api/v1")
app.include_router(shows_router, prefix="/api/v1")
app.include_router(seasons_router, prefix="/api/v1")
app.include_router(episodes_router, prefix="/api/v1")
app.include_router(characters_router, prefix="/api/v1")


@app.get("/", tags=["root"])
async def root():
    """API root - returns basic info and links."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs",
        "endpoints": {
            "actors": "/api/v1/actors",
            "shows": "/api/v1/shows",
            "show_seasons": "/api/v1/shows/{show_id}/seasons",
            "show_episodes": "/api/v1/shows/{show_id}/episodes",
            "show_characters": "/api/v1/shows/{show_id}/characters",
            "show_season_episodes": "/api/v1/shows/{show_id}/seasons/{season_number}/episodes",
            "season_episodes": "/api/v1/seasons/{season_id}/episodes",
            "episode_characters": "/api/v1/episodes/{episode_id}/characters",
        },
    }


@app.get("/health", tags=["health"])
def health():
    """Service/DB health."""
    uptime_seconds = round(_time_module.time() - _server_start_time, 1)
    try:
        with get_db() as conn:
            conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as e:
        logger.error("health_check_failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable", "uptime_seconds": uptime_seconds},
        )
    return {"status": "healthy", "database": "connected", "uptime_seconds": uptime_seconds}
