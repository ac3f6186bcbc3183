"""
BaseService: common patterns for domain services.

All domain services inherit from this to get standardized
query execution and keyset pagination.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Callable

import structlog

from .ordering import OrderSpec
from .pagination import PageRequest, PaginatedResult, paginate_query
from .query_builder import QueryBuilder

logger = structlog.get_logger("tvcatalog.services")


class BaseService:
    """Base class for domain services."""

    def _paginated_list(
        self,
        conn: sqlite3.Connection,
        qb: QueryBuilder,
        columns: str,
        order_spec: OrderSpec,
        page_request: PageRequest,
        url: str,
        row_mapper: Callable[[sqlite3.Row], dict] | None = None,
    ) -> PaginatedResult:
        """Execute a paginated list query."""
        return paginate_query(conn, qb, columns, order_spec, page_request, url, row_mapper)

    def _execute_one(
        self,
        conn: sqlite3.Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> sqlite3.Row | None:
        """Execute a query expecting a single row."""
        cursor = conn.cursor()
        cursor.execute(sql, params)
        return cursor.fetchone()
