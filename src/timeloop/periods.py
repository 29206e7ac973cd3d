"""Resolve named reporting periods to concrete date windows."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum


class Period(str, Enum):
    """Named windows offered when browsing or totaling time."""

    TODAY = "today"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    LAST_30_DAYS = "last-30-days"
    CUSTOM = "custom"
    ALL = "all"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date window.

    An inverted range (start after end) is allowed and simply matches
    nothing.
    """

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def resolve_period(
    period: Period | str,
    today: date | None = None,
    *,
    start: date | None = None,
    end: date | None = None,
) -> DateRange | None:
    """Map a period to an inclusive date window.

    Weeks start on Monday. ``Period.ALL`` returns None, meaning no date
    filter. ``Period.CUSTOM`` returns ``start``/``end`` untouched and raises
    ValueError when either is missing.
    """
    period = Period(period)
    today = today or date.today()

    if period is Period.ALL:
        return None
    if period is Period.CUSTOM:
        if start is None or end is None:
            raise ValueError("A custom period needs both a start and an end date")
        return DateRange(start, end)
    if period is Period.TODAY:
        return DateRange(today, today)
    if period is Period.THIS_WEEK:
        # weekday() is 0 for Monday, 6 for Sunday
        return DateRange(today - timedelta(days=today.weekday()), today)
    if period is Period.THIS_MONTH:
        return DateRange(today.replace(day=1), today)
    return DateRange(today - timedelta(days=30), today)
