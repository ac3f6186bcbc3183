"""
Catalog domain service: actors, shows, seasons, episodes and characters.

Every list method is keyset-paginated with the resource's OrderSpec.
Router becomes thin: parse request → call service → return response.
"""
from __future__ import annotations

import sqlite3

import structlog

from ..helpers.date_range import DateRange
from ..helpers.include import IncludeTree
from .base_service import BaseService
from .ordering import get_order_spec
from .pagination import PageRequest, PaginatedResult
from .query_builder import QueryBuilder

logger = structlog.get_logger("tvcatalog.services.catalog")

ACTOR_COLUMNS = "a.id, a.name, a.created_at"
SHOW_COLUMNS = "s.id, s.title, s.description, s.year, s.created_at"
SEASON_COLUMNS = "se.id, se.show_id, se.season_number, se.year, se.created_at"
EPISODE_COLUMNS = """
    e.id, e.season_id, se.show_id, se.season_number,
    e.air_date, e.title, e.description, e.created_at
"""
CHARACTER_COLUMNS = "c.id, c.show_id, c.name, c.actor_id, a.name AS actor_name"

# Parent ids bound per IN (...) query; below SQLite's default variable limit
IN_CLAUSE_CHUNK = 500


class CatalogService(BaseService):
    """Business logic for catalog queries."""

    # --- Actors ---

    def list_actors(
        self,
        conn: sqlite3.Connection,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
    ) -> PaginatedResult:
        qb = QueryBuilder("actors a")
        qb.filter_created_range(date_range.start, date_range.end, column="a.created_at")
        return self._paginated_list(
            conn, qb, ACTOR_COLUMNS, get_order_spec("actors"), page_request, url,
        )

    def get_actor(self, conn: sqlite3.Connection, actor_id: int, date_range: DateRange) -> dict | None:
        row = self._execute_one(
            conn,
            f"SELECT {ACTOR_COLUMNS} FROM actors a WHERE a.id = ? AND a.created_at BETWEEN ? AND ?",
            (actor_id, date_range.start, date_range.end),
        )
        return dict(row) if row else None

    # --- Shows ---

    def list_shows(
        self,
        conn: sqlite3.Connection,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
    ) -> PaginatedResult:
        """List shows by year (undated last), then title."""
        qb = QueryBuilder("shows s")
        qb.filter_created_range(date_range.start, date_range.end, column="s.created_at")
        return self._paginated_list(
            conn, qb, SHOW_COLUMNS, get_order_spec("shows"), page_request, url,
        )

    def get_show(self, conn: sqlite3.Connection, show_id: int, date_range: DateRange) -> dict | None:
        row = self._execute_one(
            conn,
            f"SELECT {SHOW_COLUMNS} FROM shows s WHERE s.id = ? AND s.created_at BETWEEN ? AND ?",
            (show_id, date_range.start, date_range.end),
        )
        return dict(row) if row else None

    # --- Seasons ---

    def list_seasons(
        self,
        conn: sqlite3.Connection,
        show_id: int,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
    ) -> PaginatedResult:
        qb = QueryBuilder("seasons se")
        qb.filter_equals(show_id, "se.show_id")
        qb.filter_created_range(date_range.start, date_range.end, column="se.created_at")
        return self._paginated_list(
            conn, qb, SEASON_COLUMNS, get_order_spec("seasons"), page_request, url,
        )

    def get_season(self, conn: sqlite3.Connection, season_id: int, date_range: DateRange) -> dict | None:
        row = self._execute_one(
            conn,
            f"SELECT {SEASON_COLUMNS} FROM seasons se WHERE se.id = ? AND se.created_at BETWEEN ? AND ?",
            (season_id, date_range.start, date_range.end),
        )
        return dict(row) if row else None

    def season_exists(self, conn: sqlite3.Connection, season_id: int) -> bool:
        return self._execute_one(conn, "SELECT 1 FROM seasons WHERE id = ?", (season_id,)) is not None

    def get_season_id(self, conn: sqlite3.Connection, show_id: int, season_number: int) -> int | None:
        """Id of the season numbered `season_number` within a show."""
        row = self._execute_one(
            conn,
            "SELECT id FROM seasons WHERE show_id = ? AND season_number = ?",
            (show_id, season_number),
        )
        return row["id"] if row else None

    # --- Episodes ---

    def list_episodes(
        self,
        conn: sqlite3.Connection,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
        *,
        show_id: int | None = None,
        season_id: int | None = None,
    ) -> PaginatedResult:
        """List episodes by air date (unaired last) for a show or a season."""
        qb = QueryBuilder("episodes e")
        qb.join("seasons se", "se.id = e.season_id")
        qb.filter_equals(show_id, "se.show_id")
        qb.filter_equals(season_id, "e.season_id")
        qb.filter_created_range(date_range.start, date_range.end, column="e.created_at")
        return self._paginated_list(
            conn, qb, EPISODE_COLUMNS, get_order_spec("episodes"), page_request, url,
        )

    def get_episode(self, conn: sqlite3.Connection, episode_id: int, date_range: DateRange) -> dict | None:
        row = self._execute_one(
            conn,
            f"""
            SELECT {EPISODE_COLUMNS}
            FROM episodes e JOIN seasons se ON se.id = e.season_id
            WHERE e.id = ? AND e.created_at BETWEEN ? AND ?
            """,
            (episode_id, date_range.start, date_range.end),
        )
        return dict(row) if row else None

    def episode_exists(self, conn: sqlite3.Connection, episode_id: int) -> bool:
        return self._execute_one(conn, "SELECT 1 FROM episodes WHERE id = ?", (episode_id,)) is not None

    # --- Characters ---

    def list_characters(
        self,
        conn: sqlite3.Connection,
        show_id: int,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
    ) -> PaginatedResult:
        qb = QueryBuilder("characters c")
        qb.left_join("actors a", "a.id = c.actor_id")
        qb.filter_equals(show_id, "c.show_id")
        qb.filter_created_range(date_range.start, date_range.end, column="c.created_at")
        return self._paginated_list(
            conn, qb, CHARACTER_COLUMNS, get_order_spec("characters"), page_request, url,
        )

    def list_episode_characters(
        self,
        conn: sqlite3.Connection,
        episode_id: int,
        page_request: PageRequest,
        date_range: DateRange,
        url: str,
    ) -> PaginatedResult:
        """Characters appearing in an episode; the range applies to when they were linked."""
        qb = QueryBuilder("episode_characters ec")
        qb.join("characters c", "c.id = ec.character_id")
        qb.left_join("actors a", "a.id = c.actor_id")
        qb.filter_equals(episode_id, "ec.episode_id")
        qb.filter_created_range(date_range.start, date_range.end, column="ec.created_at")
        return self._paginated_list(
            conn, qb, CHARACTER_COLUMNS, get_order_spec("characters"), page_request, url,
        )

    def get_character(self, conn: sqlite3.Connection, character_id: int, date_range: DateRange) -> dict | None:
        row = self._execute_one(
            conn,
            f"""
            SELECT {CHARACTER_COLUMNS}
            FROM characters c LEFT JOIN actors a ON a.id = c.actor_id
            WHERE c.id = ? AND c.created_at BETWEEN ? AND ?
            """,
            (character_id, date_range.start, date_range.end),
        )
        return dict(row) if row else None


    # --- ?include= expansion ---

    def expand(
        self,
        conn: sqlite3.Connection,
        resource: str,
        rows: list[dict],
        include: IncludeTree,
    ) -> list[dict]:
        """Embed the included relations into `rows` in place and return them."""
        if not include or not rows:
            return rows
        if resource == "shows":
            self._expand_shows(conn, rows, include)
        elif resource == "episodes":
            self._expand_episodes(conn, rows, include)
        elif resource == "characters":
            self._expand_characters(rows, include)
        return rows

    def _expand_shows(self, conn: sqlite3.Connection, shows: list[dict], include: IncludeTree) -> None:
        if "episodes" not in include:
            return
        # Nested episodes are the whole show, unfiltered by the request's date range
        show_ids = [show["id"] for show in shows]
        sql = f"""
            SELECT {EPISODE_COLUMNS}
            FROM episodes e JOIN seasons se ON se.id = e.season_id
            WHERE se.show_id IN ({{placeholders}})
            ORDER BY {get_order_spec("episodes").order_by()}
        """
        episodes = [dict(row) for row in _fetch_in(conn, sql, show_ids)]
        self._expand_episodes(conn, episodes, include["episodes"])

        grouped: dict[int, list[dict]] = {}
        for episode in episodes:
            grouped.setdefault(episode["show_id"], []).append(episode)
        for show in shows:
            show["episodes"] = grouped.get(show["id"], [])
        logger.debug("shows_expanded", shows=len(shows), episodes=len(episodes))

    def _expand_episodes(self, conn: sqlite3.Connection, episodes: list[dict], include: IncludeTree) -> None:
        if "characters" not in include or not episodes:
            return
        episode_ids = [episode["id"] for episode in episodes]
        sql = f"""
            SELECT ec.episode_id, {CHARACTER_COLUMNS}
            FROM episode_characters ec
            JOIN characters c ON c.id = ec.character_id
            LEFT JOIN actors a ON a.id = c.actor_id
            WHERE ec.episode_id IN ({{placeholders}})
            ORDER BY {get_order_spec("characters").order_by()}
        """
        grouped: dict[int, list[dict]] = {}
        for row in _fetch_in(conn, sql, episode_ids):
            character = dict(row)
            grouped.setdefault(character.pop("episode_id"), []).append(character)

        characters = [c for group in grouped.values() for c in group]
        self._expand_characters(characters, include["characters"])
        for episode in episodes:
            episode["characters"] = grouped.get(episode["id"], [])

    def _expand_characters(self, characters: list[dict], include: IncludeTree) -> None:
        if "actor" not in include:
            return
        for character in characters:
            if character["actor_id"] is None:
                character["actor"] = None
            else:
                character["actor"] = {"id": character["actor_id"], "name": character["actor_name"]}


def _fetch_in(conn: sqlite3.Connection, sql: str, ids: list[int]) -> list[sqlite3.Row]:
    """Run `sql` once per chunk of `ids`, filling its {placeholders} slot."""
    rows: list[sqlite3.Row] = []
    for start in range(0, len(ids), IN_CLAUSE_CHUNK):
        chunk = ids[start:start + IN_CLAUSE_CHUNK]
        rows.extend(conn.execute(sql.format(placeholders=", ".join("?" * len(chunk))), chunk).fetchall())
    return rows


# Singleton instance
catalog_service = CatalogService()
