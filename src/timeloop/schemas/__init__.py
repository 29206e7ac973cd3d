"""Pydantic schemas for the Timeloop API."""

from timeloop.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from timeloop.schemas.entry import (
    EntryCreate,
    EntryUpdate,
    EntryResponse,
    BatchAssignCategory,
    BatchDelete,
)
from timeloop.schemas.time_record import (
    TimeRecordCreate,
    TimeRecordUpdate,
    TimeRecordResponse,
    TimeRecordDetailResponse,
)
from timeloop.schemas.totals import EntryTotals, SelectionTotal, PeriodWindow

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "EntryCreate",
    "EntryUpdate",
    "EntryResponse",
    "BatchAssignCategory",
    "BatchDelete",
    "TimeRecordCreate",
    "TimeRecordUpdate",
    "TimeRecordResponse",
    "TimeRecordDetailResponse",
    "EntryTotals",
    "SelectionTotal",
    "PeriodWindow",
]
