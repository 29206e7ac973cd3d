"""Aggregate schemas for totals over a date window."""

from datetime import date

from timeloop.schemas.base import BaseSchema


class EntryTotals(BaseSchema):
    """Per-entry totals for one window. Never persisted."""

    id: int
    title: str
    category_id: int | None
    category_name: str | None = None
    category_color: str | None = None
    total_duration: int = 0
    first_date: date | None = None
    last_date: date | None = None
    entry_count: int = 0


class SelectionTotal(BaseSchema):
    """Summed minutes for an explicit set of entries."""

    entry_ids: list[int]
    start: date | None = None
    end: date | None = None
    total_duration: int
    formatted: str


class PeriodWindow(BaseSchema):
    """A resolved period. Both bounds are None for the unbounded period."""

    period: str
    start: date | None = None
    end: date | None = None
