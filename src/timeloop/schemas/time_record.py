"""Time record schemas."""

from datetime import date as calendar_date, datetime

from pydantic import Field, field_validator

from timeloop.schemas.base import BaseSchema


class TimeRecordUpdate(BaseSchema):
    """Schema for updating a time record. All fields are replaced."""

    duration: int = Field(..., gt=0, description="Minutes")
    date: calendar_date = Field(default_factory=calendar_date.today)
    note: str | None = None

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TimeRecordCreate(TimeRecordUpdate):
    """Schema for logging time against an entry."""

    entry_id: int


class TimeRecordResponse(BaseSchema):
    """Schema for time record responses."""

    id: int
    entry_id: int
    duration: int
    date: calendar_date
    note: str | None
    created_at: datetime


class TimeRecordDetailResponse(TimeRecordResponse):
    """Time record with the owning entry's display fields."""

    entry_title: str
    category_name: str | None = None
    category_color: str | None = None
