"""Shared query parameters."""

from collections.abc import Callable
from datetime import date

from fastapi import HTTPException, Query, status

from timeloop.periods import DateRange, Period, resolve_period


def window_param(default: Period) -> Callable[..., DateRange | None]:
    """Build a dependency resolving ``period``/``start``/``end`` to a window."""

    def resolve(
        period: Period = Query(default, description="Named period"),
        start: date | None = Query(None, description="Start date for a custom period"),
        end: date | None = Query(None, description="End date for a custom period"),
    ) -> DateRange | None:
        try:
            return resolve_period(period, start=start, end=end)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

    return resolve
