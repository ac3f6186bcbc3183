# Pydantic models for API request/response
from .common import CursorPaginationMeta, PaginatedResponse
from .catalog import (
    Actor,
    ActorListResponse,
    Show,
    ShowListResponse,
    Season,
    SeasonListResponse,
    Episode,
    EpisodeListResponse,
    Character,
    CharacterListResponse,
)

__all__ = [
    "CursorPaginationMeta",
    "PaginatedResponse",
    "Actor",
    "ActorListResponse",
    "Show",
    "ShowListResponse",
    "Season",
    "SeasonListResponse",
    "Episode",
    "EpisodeListResponse",
    "Character",
    "CharacterListResponse",
]
