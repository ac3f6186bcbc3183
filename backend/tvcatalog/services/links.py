"""
previous/next continuation links for a page window.

Links reuse the request URL: limit, offset and page_info are replaced, every
other query parameter (filters) is kept as-is.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from starlette.datastructures import URL

from ..config.constants import PAGINATION_PARAMS
from .cursor import CursorDirection, encode_cursor
from .ordering import OrderSpec

if TYPE_CHECKING:
    from .pagination import PageResult


@dataclass(frozen=True)
class PageLinks:
    """Absolute URLs of the neighbouring pages, None when absent."""

    previous: str | None = None
    next: str | None = None

    def header(self) -> str | None:
        """RFC 5988 Link header value, or None when there is nothing to link."""
        parts = []
        if self.previous:
            parts.append(f'<{self.previous}>; rel="previous"')
        if self.next:
            parts.append(f'<{self.next}>; rel="next"')
        return ", ".join(parts) or None


def build_page_url(url: str | URL, limit: int, page_info: str) -> str:
    """Rewrite `url` to point at the page described by `page_info`."""
    target = URL(str(url)).remove_query_params(PAGINATION_PARAMS)
    return str(target.include_query_params(limit=limit, page_info=page_info))


def build_page_links(
    url: str | URL,
    result: PageResult,
    order_spec: OrderSpec,
    limit: int | None,
) -> PageLinks:
    """Derive previous/next links from the first/last row of the window."""
    if not result.items or limit is None:
        return PageLinks()

    previous = None
    if result.has_previous:
        token = encode_cursor(CursorDirection.PREV, limit, order_spec.values_of(result.items[0]))
        previous = build_page_url(url, limit, token)

    next_url = None
    if result.has_next:
        token = encode_cursor(CursorDirection.NEXT, limit, order_spec.values_of(result.items[-1]))
        next_url = build_page_url(url, limit, token)

    return PageLinks(previous=previous, next=next_url)
