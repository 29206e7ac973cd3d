"""Totals and period API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.api.params import window_param
from timeloop.database import get_db
from timeloop.durations import format_duration
from timeloop.periods import DateRange, Period, resolve_period
from timeloop.schemas.totals import EntryTotals, PeriodWindow, SelectionTotal
from timeloop.services.totals_service import TotalsService

router = APIRouter(prefix="/totals", tags=["totals"])
periods_router = APIRouter(prefix="/periods", tags=["periods"])


@router.get("", response_model=list[EntryTotals])
async def list_totals(
    include_empty: bool = False,
    category_id: int | None = Query(None, description="Only entries in this category"),
    window: DateRange | None = Depends(window_param(Period.LAST_30_DAYS)),
    db: AsyncSession = Depends(get_db),
):
    """Per-entry totals for a period."""
    service = TotalsService(db)
    return await service.get_entry_totals(
        window,
        include_empty=include_empty,
        category_id=category_id,
    )


@router.get("/selection", response_model=SelectionTotal)
async def selection_total(
    entry_ids: list[int] = Query([]),
    window: DateRange | None = Depends(window_param(Period.LAST_30_DAYS)),
    db: AsyncSession = Depends(get_db),
):
    """Summed minutes for a hand-picked set of entries."""
    service = TotalsService(db)
    total = await service.calculate_total(entry_ids, window)
    return SelectionTotal(
        entry_ids=entry_ids,
        start=window.start if window else None,
        end=window.end if window else None,
        total_duration=total,
        formatted=format_duration(total),
    )


@periods_router.get("/{period}", response_model=PeriodWindow)
async def get_period(
    period: Period,
    start: date | None = None,
    end: date | None = None,
):
    """Show the dates a named period covers today."""
    try:
        window = resolve_period(period, start=start, end=end)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return PeriodWindow(
        period=period.value,
        start=window.start if window else None,
        end=window.end if window else None,
    )
