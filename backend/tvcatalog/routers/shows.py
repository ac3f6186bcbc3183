"""
API router for show endpoints.

Provides the show list and detail plus the per-show season, episode
and character lists. Every list is keyset-paginated (limit / offset /
page_info) and advertises neighbouring pages in a Link header.

Thin router; business logic lives in CatalogService.
"""
from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from ..config.constants import SQLITE_MAX_INTEGER
from ..dependencies import get_date_range, get_db, get_page_request, include_param
from ..helpers.date_range import DateRange
from ..helpers.include import IncludeTree
from ..models.catalog import (
    CharacterListResponse,
    EpisodeListResponse,
    SeasonListResponse,
    Show,
    ShowListResponse,
)
from ..services.catalog_service import catalog_service
from ..services.pagination import PageRequest
from .common import paginated_response

router = APIRouter(prefix="/shows", tags=["shows"])


@router.get("", response_model=ShowListResponse, response_model_exclude_unset=True)
def list_shows(
    request: Request,
    response: Response,
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("shows")),
):
    """
    List shows ordered by premiere year, then title.

    Shows without a year sort after all dated shows. `include=episodes`
    embeds every episode of each show on the page.
    """
    with get_db() as conn:
        result = catalog_service.list_shows(conn, page_request, date_range, str(request.url))
        catalog_service.expand(conn, "shows", result.data, include)
    return paginated_response(result, response)


@router.get("/{show_id}", response_model=Show, response_model_exclude_unset=True)
def get_show(
    show_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Show ID"),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("shows")),
):
    with get_db() as conn:
        show = catalog_service.get_show(conn, show_id, date_range)
        if show is None:
            raise HTTPException(status_code=404, detail="show not found")
        catalog_service.expand(conn, "shows", [show], include)
    return show


@router.get("/{show_id}/seasons", response_model=SeasonListResponse)
def list_show_seasons(
    request: Request,
    response: Response,
    show_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Show ID"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
):
    """List seasons of a show by season number."""
    with get_db() as conn:
        result = catalog_service.list_seasons(conn, show_id, page_request, date_range, str(request.url))
    return paginated_response(result, response)


@router.get(
    "/{show_id}/seasons/{season_number}/episodes",
    response_model=EpisodeListResponse,
    response_model_exclude_unset=True,
)
def list_show_season_episodes(
    request: Request,
    response: Response,
    show_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Show ID"),
    season_number: int = Path(..., ge=0, le=SQLITE_MAX_INTEGER, description="Season number within the show"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("episodes")),
):
    """List episodes of a show's season, addressed by its season number."""
    with get_db() as conn:
        season_id = catalog_service.get_season_id(conn, show_id, season_number)
        if season_id is None:
            raise HTTPException(status_code=404, detail="season not found for this show")
        result = catalog_service.list_episodes(
            conn, page_request, date_range, str(request.url), season_id=season_id,
        )
        catalog_service.expand(conn, "episodes", result.data, include)
    return paginated_response(result, response)


@router.get("/{show_id}/episodes", response_model=EpisodeListResponse, response_model_exclude_unset=True)
def list_show_episodes(
    request: Request,
    response: Response,
    show_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Show ID"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("episodes")),
):
    """List all episodes of a show by air date; unaired episodes come last."""
    with get_db() as conn:
        result = catalog_service.list_episodes(
            conn, page_request, date_range, str(request.url), show_id=show_id,
        )
        catalog_service.expand(conn, "episodes", result.data, include)
    return paginated_response(result, response)


@router.get("/{show_id}/characters", response_model=CharacterListResponse, response_model_exclude_unset=True)
def list_show_characters(
    request: Request,
    response: Response,
    show_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Show ID"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("characters")),
):
    """List characters of a show by name."""
    with get_db() as conn:
        result = catalog_service.list_characters(conn, show_id, page_request, date_range, str(request.url))
        catalog_service.expand(conn, "characters", result.data, include)
    return paginated_response(result, response)
