"""Entry schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from timeloop.schemas.base import BaseSchema


class EntryCreate(BaseSchema):
    """Schema for creating an entry."""

    title: str = Field(..., min_length=1, max_length=500)
    category_id: int | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value


class EntryUpdate(EntryCreate):
    """Schema for updating an entry. Title and category are both replaced."""


class EntryResponse(BaseSchema):
    """Schema for entry responses, flattened with category display fields."""

    id: int
    title: str
    category_id: int | None
    category_name: str | None = None
    category_color: str | None = None
    created_at: datetime


class BatchAssignCategory(BaseSchema):
    """Assign (or clear) the category of several entries at once."""

    entry_ids: list[int] = Field(..., min_length=1)
    category_id: int | None = None


class BatchDelete(BaseSchema):
    """Delete several entries at once."""

    entry_ids: list[int] = Field(..., min_length=1)
