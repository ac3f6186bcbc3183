"""Database connection and common dependencies for the API."""
import sqlite3
import os
from pathlib import Path
from contextlib import contextmanager
from typing import Generator, List, Optional

from fastapi import Query

from .helpers.date_range import DateRange, parse_date_range
from .helpers.include import IncludeTree, parse_include, prune_include
from .services.pagination import PageRequest, parse_pagination

# Database path - configurable via env var, defaults to backend/tvcatalog.db
DB_PATH = Path(os.environ.get("DATABASE_PATH", str(Path(__file__).parent.parent / "tvcatalog.db")))

# Query timeout in seconds (configurable via environment variable)
DB_QUERY_TIMEOUT = int(os.environ.get("DB_QUERY_TIMEOUT", "30"))

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_db_connection() -> sqlite3.Connection:
    """Create a database connection with row factory and timeout."""
    conn = sqlite3.connect(str(DB_PATH), timeout=DB_QUERY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    # Set busy timeout to handle concurrent access
    conn.execute(f"PRAGMA busy_timeout = {DB_QUERY_TIMEOUT * 1000}")
    # WAL mode allows concurrent readers while one writer is active
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    conn = get_db_connection()
    try:
        yield conn
    finally:
        conn.close()


def init_schema(conn: sqlite3.Connection) -> None:
    """Create catalog tables and indexes if they do not exist."""
    conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
    conn.commit()


def verify_database_exists() -> bool:
    """Check if the database file exists."""
    return DB_PATH.exists()


def get_page_request(
    limit: Optional[str] = Query(None, description="Page size (positive integer)"),
    offset: Optional[str] = Query(None, description="Rows to skip; requires limit, excludes page_info"),
    page_info: Optional[str] = Query(None, description="Opaque continuation token from a Link header"),
) -> PageRequest:
    """FastAPI dependency: validated pagination parameters."""
    return parse_pagination(limit, offset, page_info)


def get_date_range(
    start: Optional[str] = Query(None, description="Only rows created at or after this ISO-8601 timestamp"),
    end: Optional[str] = Query(None, description="Only rows created at or before this ISO-8601 timestamp"),
) -> DateRange:
    """FastAPI dependency: validated created_at range."""
    return parse_date_range(start, end)


def include_param(resource: str):
    """Build a FastAPI dependency that parses ?include= for `resource`."""

    def get_include(
        include: Optional[List[str]] = Query(
            None, description="Comma separated relations to embed, e.g. episodes,episodes.characters"
        ),
    ) -> IncludeTree:
        return prune_include(parse_include(include), resource)

    return get_include
