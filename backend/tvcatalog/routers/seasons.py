"""API router for season endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from ..config.constants import SQLITE_MAX_INTEGER
from ..dependencies import get_date_range, get_db, get_page_request, include_param
from ..helpers.date_range import DateRange
from ..helpers.include import IncludeTree
from ..models.catalog import EpisodeListResponse, Season
from ..services.catalog_service import catalog_service
from ..services.pagination import PageRequest
from .common import paginated_response

router = APIRouter(prefix="/seasons", tags=["seasons"])


@router.get("/{season_id}", response_model=Season)
def get_season(
    season_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Season ID"),
    date_range: DateRange = Depends(get_date_range),
):
    with get_db() as conn:
        season = catalog_service.get_season(conn, season_id, date_range)
    if season is None:
        raise HTTPException(status_code=404, detail="season not found")
    return season


@router.get("/{season_id}/episodes", response_model=EpisodeListResponse, response_model_exclude_unset=True)
def list_season_episodes(
    request: Request,
    response: Response,
    season_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Season ID"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("episodes")),
):
    """List episodes of a season by air date."""
    with get_db() as conn:
        if not catalog_service.season_exists(conn, season_id):
            raise HTTPException(status_code=404, detail="season not found")
        result = catalog_service.list_episodes(
            conn, page_request, date_range, str(request.url), season_id=season_id,
        )
        catalog_service.expand(conn, "episodes", result.data, include)
    return paginated_response(result, response)
