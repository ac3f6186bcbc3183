"""API router for episode endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from ..config.constants import SQLITE_MAX_INTEGER
from ..dependencies import get_date_range, get_db, get_page_request, include_param
from ..helpers.date_range import DateRange
from ..helpers.include import IncludeTree
from ..models.catalog import CharacterListResponse, Episode
from ..services.catalog_service import catalog_service
from ..services.pagination import PageRequest
from .common import paginated_response

router = APIRouter(prefix="/episodes", tags=["episodes"])


@router.get("/{episode_id}", response_model=Episode, response_model_exclude_unset=True)
def get_episode(
    episode_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Episode ID"),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("episodes")),
):
    with get_db() as conn:
        episode = catalog_service.get_episode(conn, episode_id, date_range)
        if episode is None:
            raise HTTPException(status_code=404, detail="episode not found")
        catalog_service.expand(conn, "episodes", [episode], include)
    return episode


@router.get("/{episode_id}/characters", response_model=CharacterListResponse, response_model_exclude_unset=True)
def list_episode_characters(
    request: Request,
    response: Response,
    episode_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Episode ID"),
    page_request: PageRequest = Depends(get_page_request),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("characters")),
):
    """List characters appearing in an episode by name."""
    with get_db() as conn:
        if not catalog_service.episode_exists(conn, episode_id):
            raise HTTPException(status_code=404, detail="episode not found")
        result = catalog_service.list_episode_characters(
            conn, episode_id, page_request, date_range, str(request.url),
        )
        catalog_service.expand(conn, "characters", result.data, include)
    return paginated_response(result, response)
