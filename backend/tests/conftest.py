"""
Pytest fixtures for API tests.

The API runs against a throwaway SQLite file seeded with a small catalog.
"""
import sqlite3

import pytest
from fastapi.testclient import TestClient

from tvcatalog import dependencies
from tvcatalog.dependencies import init_schema
from tvcatalog.main import app

SEED_TIMESTAMP = "2024-01-01 00:00:00"
LATE_TIMESTAMP = "2025-06-01 12:00:00"

ACTORS = [
    (1, "Tom Baker"),
    (2, "Elisabeth Sladen"),
    (3, "Joanna Lumley"),
    (4, "David McCallum"),
    (5, "Ben Browder"),
    (6, "Claudia Black"),
]

# (id, title, year, created_at)
SHOWS = [
    (1, "Doctor Who", 1963, SEED_TIMESTAMP),
    (2, "The Twilight Zone", 1959, SEED_TIMESTAMP),
    (3, "Space: 1999", 1975, SEED_TIMESTAMP),
    (4, "Sapphire & Steel", 1979, SEED_TIMESTAMP),
    (5, "Farscape", 1999, SEED_TIMESTAMP),
    (6, "Stargate Universe", 2009, SEED_TIMESTAMP),
    (7, "The Expanse", 2015, LATE_TIMESTAMP),
    (8, "Untitled Pilot", None, SEED_TIMESTAMP),
    (9, "Another Pilot", None, SEED_TIMESTAMP),
]

# (id, show_id, season_number, year)
SEASONS = [
    (1, 1, 1, 1963),
    (2, 1, 2, 1964),
    (3, 1, 3, 1965),
    (4, 5, 1, 1999),
]

# (id, season_id, air_date, title)
EPISODES = [
    (1, 1, "1963-11-23", "An Unearthly Child"),
    (2, 1, "1963-12-21", "The Daleks"),
    (3, 1, "1964-02-08", "The Edge of Destruction"),
    (4, 2, "1964-10-31", "Planet of Giants"),
    (5, 2, None, "Lost Episode"),
    (6, 2, None, "Unaired Pilot"),
    (7, 3, "1965-09-11", "Galaxy 4"),
    (8, 4, "1999-03-19", "Premiere"),
]

# (id, show_id, name, actor_id)
CHARACTERS = [
    (1, 1, "The Doctor", 1),
    (2, 1, "Sarah Jane Smith", 2),
    (3, 1, "Susan Foreman", None),
    (4, 1, "Ian Chesterton", None),
    (5, 4, "Sapphire", 3),
    (6, 4, "Steel", 4),
    (7, 5, "John Crichton", 5),
    (8, 5, "Aeryn Sun", 6),
]

# (id, episode_id, character_id)
EPISODE_CHARACTERS = [
    (1, 1, 1),
    (2, 1, 3),
    (3, 1, 4),
    (4, 2, 1),
]

# Expected list orders (ids)
SHOW_ORDER = [2, 1, 3, 4, 5, 6, 7, 9, 8]
DOCTOR_WHO_EPISODE_ORDER = [1, 2, 3, 4, 7, 5, 6]
DOCTOR_WHO_CHARACTER_ORDER = [4, 2, 3, 1]
ACTOR_ORDER = [5, 6, 4, 2, 3, 1]


def seed_catalog(conn: sqlite3.Connection) -> None:
    """Insert the fixture catalog."""
    conn.executemany(
        "INSERT INTO actors (id, name, created_at) VALUES (?, ?, ?)",
        [(*row, SEED_TIMESTAMP) for row in ACTORS],
    )
    conn.executemany(
        "INSERT INTO shows (id, title, year, created_at) VALUES (?, ?, ?, ?)",
        SHOWS,
    )
    conn.executemany(
        "INSERT INTO seasons (id, show_id, season_number, year, created_at) VALUES (?, ?, ?, ?, ?)",
        [(*row, SEED_TIMESTAMP) for row in SEASONS],
    )
    conn.executemany(
        "INSERT INTO episodes (id, season_id, air_date, title, created_at) VALUES (?, ?, ?, ?, ?)",
        [(*row, SEED_TIMESTAMP) for row in EPISODES],
    )
    conn.executemany(
        "INSERT INTO characters (id, show_id, name, actor_id, created_at) VALUES (?, ?, ?, ?, ?)",
        [(*row, SEED_TIMESTAMP) for row in CHARACTERS],
    )
    conn.executemany(
        "INSERT INTO episode_characters (id, episode_id, character_id, created_at) VALUES (?, ?, ?, ?)",
        [(*row, SEED_TIMESTAMP) for row in EPISODE_CHARACTERS],
    )


@pytest.fixture(scope="session")
def catalog_db_path(tmp_path_factory):
    """SQLite file with the schema applied and the fixture catalog loaded."""
    path = tmp_path_factory.mktemp("catalog") / "tvcatalog_test.db"
    conn = sqlite3.connect(str(path))
    try:
        init_schema(conn)
        seed_catalog(conn)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture(scope="module")
def client(catalog_db_path):
    """Create a test client for the FastAPI app bound to the seeded database."""
    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(dependencies, "DB_PATH", catalog_db_path)
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture(scope="module")
def base_url():
    """Base URL for API v1 endpoints."""
    return "/api/v1"


@pytest.fixture
def catalog_conn(catalog_db_path):
    """Direct connection to the seeded database."""
    conn = sqlite3.connect(str(catalog_db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
