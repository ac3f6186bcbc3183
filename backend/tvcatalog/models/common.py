"""Common Pydantic models for pagination and responses."""
from pydantic import BaseModel, Field
from typing import TypeVar, Generic, List, Optional

T = TypeVar("T")


class CursorPaginationMeta(BaseModel):
    """Pagination metadata for keyset-paginated list responses."""

    limit: Optional[int] = Field(None, description="Page size; null when the list is unbounded")
    offset: int = Field(0, description="Rows skipped (offset mode only)")
    has_previous: bool = Field(..., description="Whether a previous page exists")
    has_next: bool = Field(..., description="Whether a next page exists")
    previous: Optional[str] = Field(None, description="URL of the previous page")
    next: Optional[str] = Field(None, description="URL of the next page")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    data: List[T]
    pagination: CursorPaginationMeta
