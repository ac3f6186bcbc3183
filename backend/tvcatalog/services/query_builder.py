"""
QueryBuilder: fluent SQL query construction with parameterized queries.

Every list endpoint builds its base filters here; the pagination planner then
adds the cursor predicate, ORDER BY and LIMIT/OFFSET on the same builder.
All user inputs go through ? parameterized placeholders to prevent SQL injection.
"""
from __future__ import annotations

from typing import Any


class QueryBuilder:
    """Fluent SQL query builder with safe parameterization."""

    def __init__(self, base_table: str):
        """
        Args:
            base_table: Table name with optional alias, e.g. "shows s"
        """
        self.base_table = base_table
        self._conditions: list[str] = []
        self._params: list[Any] = []
        self._joins: list[str] = []
        self._order_by: str | None = None
        self._limit: int | None = None
        self._offset: int | None = None

    # --- Join methods ---

    def join(self, table: str, on: str) -> QueryBuilder:
        """Add INNER JOIN."""
        self._joins.append(f"JOIN {table} ON {on}")
        return self

    def left_join(self, table: str, on: str) -> QueryBuilder:
        """Add LEFT JOIN."""
        self._joins.append(f"LEFT JOIN {table} ON {on}")
        return self

    # --- Generic where ---

    def where(self, condition: str, *params: Any) -> QueryBuilder:
        """Add a WHERE condition with parameters."""
        self._conditions.append(condition)
        self._params.extend(params)
        return self

    # --- Domain-specific filters ---

    def filter_equals(self, value: Any, column: str) -> QueryBuilder:
        """Filter on column = value if value is provided."""
        if value is not None:
            self._conditions.append(f"{column} = ?")
            self._params.append(value)
        return self

    def filter_created_range(
        self,
        start: str | None,
        end: str | None,
        column: str = "created_at",
    ) -> QueryBuilder:
        """Filter by an inclusive created_at range (SQLite 'YYYY-MM-DD HH:MM:SS' text)."""
        if start is not None and end is not None:
            self._conditions.append(f"{column} BETWEEN ? AND ?")
            self._params.extend([start, end])
        elif start is not None:
            self._conditions.append(f"{column} >= ?")
            self._params.append(start)
        elif end is not None:
            self._conditions.append(f"{column} <= ?")
            self._params.append(end)
        return self

    # --- Sorting ---

    def order_by(self, clause: str) -> QueryBuilder:
        """Set ORDER BY directly (use only with trusted input)."""
        self._order_by = clause
        return self

    # --- Pagination ---

    def limit(self, n: int) -> QueryBuilder:
        """Set LIMIT directly."""
        self._limit = n
        return self

    def offset(self, n: int) -> QueryBuilder:
        """Set OFFSET directly. SQLite only honours it together with LIMIT."""
        self._offset = n
        return self

    # --- Build methods ---

    def _build_from(self) -> str:
        """Build FROM + JOINs clause."""
        parts = [f"FROM {self.base_table}"]
        parts.extend(self._joins)
        return " ".join(parts)

    def _build_where(self) -> str:
        """Build WHERE clause."""
        if not self._conditions:
            return ""
        return "WHERE " + " AND ".join(self._conditions)

    def _build_tail(self) -> str:
        """Build ORDER BY + LIMIT + OFFSET."""
        parts = []
        if self._order_by:
            parts.append(f"ORDER BY {self._order_by}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        if self._offset is not None:
            parts.append(f"OFFSET {self._offset}")
        return " ".join(parts)

    def build_select(self, columns: str) -> tuple[str, list[Any]]:
        """Build a full SELECT query."""
        parts = [
            f"SELECT {columns}",
            self._build_from(),
            self._build_where(),
            self._build_tail(),
        ]
        sql = " ".join(p for p in parts if p)
        return sql, list(self._params)
