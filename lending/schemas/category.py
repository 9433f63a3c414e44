"""Category Pydantic schemas."""
from pydantic import BaseModel, Field

from lending.schemas.common import BaseSchema


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)


class CategoryResponse(BaseSchema):
    """Schema for category response."""

    id: int
    name: str
