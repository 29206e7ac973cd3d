"""Category schemas."""

from datetime import datetime

from pydantic import Field

from timeloop.models.category import DEFAULT_CATEGORY_COLOR
from timeloop.schemas.base import BaseSchema

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(BaseSchema):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(DEFAULT_CATEGORY_COLOR, pattern=HEX_COLOR_PATTERN)


class CategoryUpdate(BaseSchema):
    """Schema for updating a category. Both fields are replaced."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)


class CategoryResponse(BaseSchema):
    """Schema for category responses."""

    id: int
    name: str
    color: str
    created_at: datetime
