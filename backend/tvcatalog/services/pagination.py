"""
Keyset (opaque cursor) pagination shared by every list endpoint.

Flow for one request:
    parse_pagination -> create_paginated_query -> store read
    -> apply_pagination_result -> build_page_links

Two mutually exclusive modes:
    - offset mode: ?limit=N[&offset=M], plain LIMIT/OFFSET
    - cursor mode: ?page_info=<token>[&limit=N], keyset predicate on the
      anchor row's sort values

Only paginate_query touches the database; everything else is pure.
"""
from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

import structlog
from pydantic import ValidationError

from ..config.constants import MAX_PAGE_LIMIT, SQLITE_MAX_INTEGER
from ..middleware.error_handler import InvalidCursor, InvalidPaginationParams
from .cursor import CursorDirection, CursorToken, decode_cursor
from .links import PageLinks, build_page_links
from .ordering import OrderSpec
from .query_builder import QueryBuilder

logger = structlog.get_logger("tvcatalog.services.pagination")

_DIGITS_RE = re.compile(r"[0-9]+")
_MAX_INTEGER_DIGITS = len(str(SQLITE_MAX_INTEGER))


@dataclass(frozen=True)
class PageRequest:
    """Validated pagination parameters for a single request."""

    limit: int | None = None
    offset: int = 0
    cursor_values: Mapping[str, Any] | None = None
    cursor_direction: CursorDirection | None = None
    using_page_info: bool = False

    @property
    def is_backward(self) -> bool:
        return self.cursor_direction is CursorDirection.PREV


@dataclass
class PageResult:
    """One window of rows in presentation order."""

    items: list[Any] = field(default_factory=list)
    has_previous: bool = False
    has_next: bool = False


@dataclass
class PaginatedResult:
    """Mapped rows plus the pagination envelope and links."""

    data: list[dict] = field(default_factory=list)
    pagination: dict = field(default_factory=dict)
    links: PageLinks = field(default_factory=PageLinks)


# =============================================================================
# REQUEST PARSING
# =============================================================================

def _to_int(raw: str) -> int | None:
    """
    Decimal digits to int, or None when `raw` is not all digits.

    Digit strings too long for a SQLite INTEGER come back as SQLITE_MAX_INTEGER + 1.
    """
    if not _DIGITS_RE.fullmatch(raw):
        return None
    # Compare lengths first; int() refuses very long digit strings
    digits = raw.lstrip("0") or "0"
    if len(digits) > _MAX_INTEGER_DIGITS:
        return SQLITE_MAX_INTEGER + 1
    return int(digits)


def _parse_limit(raw: str | None) -> int | None:
    if raw is None:
        return None
    limit = _to_int(raw)
    if limit is None or limit <= 0:
        raise InvalidPaginationParams(
            "limit must be a positive integer", {"parameter": "limit"}
        )
    if limit > MAX_PAGE_LIMIT:
        raise InvalidPaginationParams(
            f"limit must not exceed {MAX_PAGE_LIMIT}", {"parameter": "limit"}
        )
    return limit


def _parse_offset(raw: str | None) -> int | None:
    if raw is None:
        return None
    offset = _to_int(raw)
    if offset is None or offset > SQLITE_MAX_INTEGER:
        raise InvalidPaginationParams(
            "offset must be a non-negative integer", {"parameter": "offset"}
        )
    return offset


def _parse_page_info(raw: str) -> CursorToken:
    payload = decode_cursor(raw)
    if payload is None:
        logger.warning("invalid_page_info", reason="undecodable")
        raise InvalidCursor("page_info is invalid", {"parameter": "page_info"})
    try:
        return CursorToken.model_validate(payload)
    except ValidationError as exc:
        logger.warning("invalid_page_info", reason="schema", errors=exc.error_count())
        raise InvalidCursor("page_info is invalid", {"parameter": "page_info"}) from exc


def parse_pagination(
    limit: str | None = None,
    offset: str | None = None,
    page_info: str | None = None,
) -> PageRequest:
    """
    Validate raw query-string values into a PageRequest.

    Args:
        limit: Page size, positive integer
        offset: Rows to skip, non-negative integer; requires limit
        page_info: Opaque continuation token; excludes offset

    Raises:
        InvalidPaginationParams: bad, missing or conflicting parameters
        InvalidCursor: page_info fails to decode or validate
    """
    parsed_limit = _parse_limit(limit)
    parsed_offset = _parse_offset(offset)

    if page_info is not None and parsed_offset is not None:
        raise InvalidPaginationParams(
            "offset cannot be combined with page_info", {"parameter": "offset"}
        )

    if page_info is None:
        if parsed_offset is not None and parsed_limit is None:
            raise InvalidPaginationParams(
                "limit is required when using offset", {"parameter": "limit"}
            )
        return PageRequest(limit=parsed_limit, offset=parsed_offset or 0)

    token = _parse_page_info(page_info)

    if token.limit is not None:
        if parsed_limit is not None and parsed_limit != token.limit:
            raise InvalidPaginationParams(
                "limit must match the value embedded in page_info",
                {"parameter": "limit"},
            )
        parsed_limit = token.limit
    if parsed_limit is None:
        raise InvalidPaginationParams(
            "limit is required when using page_info", {"parameter": "limit"}
        )

    return PageRequest(
        limit=parsed_limit,
        offset=0,
        cursor_values=dict(token.sort_values),
        cursor_direction=token.direction,
        using_page_info=True,
    )


# =============================================================================
# QUERY PLANNING
# =============================================================================

def build_cursor_condition(
    order_spec: OrderSpec,
    values: Mapping[str, Any],
    forward: bool = True,
) -> tuple[str, list[Any]]:
    """
    Build the keyset predicate selecting rows strictly beyond the anchor.

    For keys k0..kn-1 the predicate is
        (k0 op v0) OR (k0 = v0 AND k1 op v1) OR ... OR (k0 = v0 AND ... AND kn-1 op vn-1)
    where op depends on each key's direction and the traversal direction.

    Raises:
        InvalidCursor: the recorded key names differ from the ordering's
    """
    if set(values) != set(order_spec.names):
        logger.warning(
            "invalid_page_info",
            reason="order_mismatch",
            expected=list(order_spec.names),
            received=sorted(values),
        )
        raise InvalidCursor(
            "page_info does not match the ordering of this endpoint",
            {"parameter": "page_info"},
        )

    clauses: list[str] = []
    params: list[Any] = []
    for i, key in enumerate(order_spec.keys):
        parts = []
        for prior in order_spec.keys[:i]:
            parts.append(f"{prior.expression} = ?")
            params.append(prior.sql_value(values[prior.name]))
        parts.append(f"{key.expression} {key.comparison(forward)} ?")
        params.append(key.sql_value(values[key.name]))
        clauses.append("(" + " AND ".join(parts) + ")")

    return "(" + " OR ".join(clauses) + ")", params


def create_paginated_query(
    qb: QueryBuilder,
    order_spec: OrderSpec,
    page_request: PageRequest,
) -> QueryBuilder:
    """
    Augment a QueryBuilder holding the base filters for one page.

    Adds the cursor predicate (cursor mode), the effective ORDER BY (flipped when
    moving backward), LIMIT limit+1 for the lookahead row, and OFFSET (offset mode).
    Issues no I/O.
    """
    backward = page_request.is_backward

    if page_request.cursor_values is not None:
        condition, params = build_cursor_condition(
            order_spec, page_request.cursor_values, forward=not backward
        )
        qb.where(condition, *params)

    qb.order_by(order_spec.order_by(reverse=backward))

    if page_request.limit is not None:
        qb.limit(page_request.limit + 1)
        if not page_request.using_page_info and page_request.offset:
            qb.offset(page_request.offset)

    logger.debug(
        "page_planned",
        table=qb.base_table,
        limit=page_request.limit,
        offset=page_request.offset,
        direction=page_request.cursor_direction.value if page_request.cursor_direction else None,
    )
    return qb


# =============================================================================
# RESULT WINDOWING
# =============================================================================

def apply_pagination_result(rows: Sequence[Any], page_request: PageRequest) -> PageResult:
    """
    Turn the over-fetched rows of a planned query into a window.

    Drops the lookahead row, restores presentation order after a backward
    traversal, and works out whether neighbouring pages exist.
    """
    if page_request.limit is None:
        return PageResult(items=list(rows), has_previous=page_request.offset > 0, has_next=False)

    has_more = len(rows) > page_request.limit
    items = list(rows[: page_request.limit])

    if not page_request.using_page_info:
        return PageResult(items=items, has_previous=page_request.offset > 0, has_next=has_more)

    if page_request.is_backward:
        items.reverse()
        return PageResult(items=items, has_previous=has_more, has_next=True)

    # An anchor implies a predecessor exists
    return PageResult(items=items, has_previous=True, has_next=has_more)


# =============================================================================
# STORE READ
# =============================================================================

def paginate_query(
    conn: sqlite3.Connection,
    qb: QueryBuilder,
    columns: str,
    order_spec: OrderSpec,
    page_request: PageRequest,
    url: str,
    row_mapper: Callable[[sqlite3.Row], dict] | None = None,
) -> PaginatedResult:
    """
    Execute one page of a list query and return a PaginatedResult.

    Args:
        conn: SQLite connection (row_factory must allow access by column name)
        qb: QueryBuilder with base filters applied (pagination is added here)
        columns: SELECT columns string; must expose every order key name
        order_spec: Ordering of the endpoint
        page_request: Output of parse_pagination
        url: Request URL the previous/next links are derived from
        row_mapper: Optional function to transform each Row to a dict.
                    If None, uses dict(row).
    """
    create_paginated_query(qb, order_spec, page_request)
    sql, params = qb.build_select(columns)

    cursor = conn.cursor()
    cursor.execute(sql, params)
    result = apply_pagination_result(cursor.fetchall(), page_request)

    links = build_page_links(url, result, order_spec, page_request.limit)

    mapper = row_mapper or (lambda row: dict(row))
    data = [mapper(row) for row in result.items]

    logger.debug(
        "page_fetched",
        table=qb.base_table,
        rows=len(data),
        has_previous=result.has_previous,
        has_next=result.has_next,
    )

    return PaginatedResult(
        data=data,
        pagination={
            "limit": page_request.limit,
            "offset": page_request.offset,
            "has_previous": result.has_previous,
            "has_next": result.has_next,
            "previous": links.previous,
            "next": links.next,
        },
        links=links,
    )
