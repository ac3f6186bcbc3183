"""Helpers shared by the catalog routers."""
from fastapi import Response

from ..services.pagination import PaginatedResult


def paginated_response(result: PaginatedResult, response: Response) -> dict:
    """Set the Link header (if any) and build the list envelope."""
    link_header = result.links.header()
    if link_header:
        response.headers["Link"] = link_header
    return {"data": result.data, "pagination": result.pagination}
