"""SQLAlchemy models for Timeloop."""

from timeloop.models.base import Base
from timeloop.models.category import Category, DEFAULT_CATEGORY_COLOR
from timeloop.models.entry import Entry
from timeloop.models.time_record import TimeRecord

__all__ = [
    "Base",
    "Category",
    "DEFAULT_CATEGORY_COLOR",
    "Entry",
    "TimeRecord",
]
