"""
API router for actor endpoints.

Thin router; business logic lives in CatalogService.
"""
from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from ..config.constants import SQLITE_MAX_INTEGER
from ..dependencies import get_date_range, get_db, get_page_request
from ..helpers.date_range import DateRange
from ..models.catalog import Actor, ActorListResponse
from ..services.catalog_service import catalog_service
from ..services.pagination import PageRequest
from .common import paginated_response

router = APIRouter(prefix="/actors", tags=["actors"])


@router.get("", response_model=ActorListResponse)
def list_actors(
    request: Request,
    response: Response,
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
):
    """List actors by name."""
    with get_db() as conn:
        result = catalog_service.list_actors(conn, page_request, date_range, str(request.url))
    return paginated_response(result, response)


@router.get("/{actor_id}", response_model=Actor)
def get_actor(
    actor_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Actor ID"),
    date_range: DateRange = Depends(get_date_range),
):
    with get_db() as conn:
        actor = catalog_service.get_actor(conn, actor_id, date_range)
    if actor is None:
        raise HTTPException(status_code=404, detail="actor not found")
    return actor
