"""Business logic services for Timeloop."""

from timeloop.services.tracking_service import (
    CategoryService,
    EntryService,
    TimeRecordService,
)
from timeloop.services.totals_service import (
    TotalsService,
    filter_totals,
    sum_durations,
)

__all__ = [
    "CategoryService",
    "EntryService",
    "TimeRecordService",
    "TotalsService",
    "filter_totals",
    "sum_durations",
]
