"""
Service layer for the TV catalog API.

Domain services encapsulate query construction, keyset pagination
and data mapping. Routers stay thin: parse request → call service → return response.
"""
from .query_builder import QueryBuilder
from .ordering import OrderKey, OrderSpec, ORDER_SPECS, get_order_spec
from .cursor import CursorDirection, CursorToken, encode_cursor, decode_cursor
from .links import PageLinks, build_page_links
from .pagination import (
    PageRequest,
    PageResult,
    PaginatedResult,
    parse_pagination,
    create_paginated_query,
    apply_pagination_result,
    paginate_query,
)
from .catalog_service import catalog_service

__all__ = [
    "QueryBuilder",
    "OrderKey",
    "OrderSpec",
    "ORDER_SPECS",
    "get_order_spec",
    "CursorDirection",
    "CursorToken",
    "encode_cursor",
    "decode_cursor",
    "PageLinks",
    "build_page_links",
    "PageRequest",
    "PageResult",
    "PaginatedResult",
    "parse_pagination",
    "create_paginated_query",
    "apply_pagination_result",
    "paginate_query",
    "catalog_service",
]
