"""Book Pydantic schemas."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from lending.models.book import BookState
from lending.schemas.common import BaseSchema


class BookCreate(BaseModel):
    """Schema for cataloging a book."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    category_id: Optional[int] = Field(None, ge=1)


class BookResponse(BaseSchema):
    """Schema for book response."""

    id: int
    title: str
    author: str
    blocked: bool
    state: BookState
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    category_id: Optional[int] = None
    user_id: Optional[int] = None
