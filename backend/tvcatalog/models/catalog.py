"""
Pydantic models for catalog endpoints.

The nested `episodes`, `characters` and `actor` fields are only present in
responses that asked for them through ?include=.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from .common import PaginatedResponse


class Actor(BaseModel):
    id: int = Field(..., description="Actor ID")
    name: str = Field(..., description="Actor name")
    created_at: Optional[str] = Field(None, description="Creation timestamp (UTC)")


class Character(BaseModel):
    id: int = Field(..., description="Character ID")
    show_id: int = Field(..., description="Owning show")
    name: str = Field(..., description="Character name")
    actor_id: Optional[int] = Field(None, description="Actor playing the character")
    actor_name: Optional[str] = Field(None, description="Name of that actor")
    actor: Optional[Actor] = Field(None, description="Embedded actor (include=actor)")


class Episode(BaseModel):
    id: int = Field(..., description="Episode ID")
    season_id: int = Field(..., description="Owning season")
    show_id: int = Field(..., description="Owning show")
    season_number: int = Field(..., description="Season number within the show")
    air_date: Optional[str] = Field(None, description="Original air date (YYYY-MM-DD)")
    title: str = Field(..., description="Episode title")
    description: Optional[str] = Field(None, description="Synopsis")
    created_at: Optional[str] = Field(None, description="Creation timestamp (UTC)")
    characters: Optional[List[Character]] = Field(
        None, description="Characters appearing in the episode (include=characters)"
    )


class Season(BaseModel):
    id: int = Field(..., description="Season ID")
    show_id: int = Field(..., description="Owning show")
    season_number: int = Field(..., description="Season number within the show")
    year: Optional[int] = Field(None, description="Year the season aired")
    created_at: Optional[str] = Field(None, description="Creation timestamp (UTC)")


class Show(BaseModel):
    id: int = Field(..., description="Show ID")
    title: str = Field(..., description="Show title")
    description: Optional[str] = Field(None, description="Synopsis")
    year: Optional[int] = Field(None, description="Premiere year")
    created_at: Optional[str] = Field(None, description="Creation timestamp (UTC)")
    episodes: Optional[List[Episode]] = Field(None, description="All episodes of the show (include=episodes)")


ActorListResponse = PaginatedResponse[Actor]
ShowListResponse = PaginatedResponse[Show]
SeasonListResponse = PaginatedResponse[Season]
EpisodeListResponse = PaginatedResponse[Episode]
CharacterListResponse = PaginatedResponse[Character]
