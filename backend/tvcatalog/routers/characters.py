"""API router for character endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path

from ..config.constants import SQLITE_MAX_INTEGER
from ..dependencies import get_date_range, get_db, include_param
from ..helpers.date_range import DateRange
from ..helpers.include import IncludeTree
from ..models.catalog import Character
from ..services.catalog_service import catalog_service

router = APIRouter(prefix="/characters", tags=["characters"])


@router.get("/{character_id}", response_model=Character, response_model_exclude_unset=True)
def get_character(
    character_id: int = Path(..., ge=1, le=SQLITE_MAX_INTEGER, description="Character ID"),
    date_range: DateRange = Depends(get_date_range),
    include: IncludeTree = Depends(include_param("characters")),
):
    with get_db() as conn:
        character = catalog_service.get_character(conn, character_id, date_range)
        if character is None:
            raise HTTPException(status_code=404, detail="character not found")
        catalog_service.expand(conn, "characters", [character], include)
    return character
