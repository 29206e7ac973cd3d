"""Time record API endpoints."""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.api.limiter import limiter, mutation_rate_limit
from timeloop.config import get_settings
from timeloop.database import get_db
from timeloop.schemas.time_record import (
    TimeRecordCreate,
    TimeRecordUpdate,
    TimeRecordResponse,
    TimeRecordDetailResponse,
)
from timeloop.services.tracking_service import TimeRecordService

router = APIRouter(prefix="/time-records", tags=["time-records"])


@router.get("", response_model=list[TimeRecordDetailResponse])
async def list_recent_time_records(
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    category_id: int | None = Query(None, description="Only records of entries in this category"),
    db: AsyncSession = Depends(get_db),
):
    """List recent time records across all entries."""
    service = TimeRecordService(db)
    records = await service.get_recent(
        limit=limit or get_settings().recent_records_limit,
        offset=offset,
        category_id=category_id,
    )
    return [TimeRecordDetailResponse.model_validate(r) for r in records]


@router.post("", response_model=TimeRecordResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_rate_limit)
async def create_time_record(
    request: Request,
    data: TimeRecordCreate,
    db: AsyncSession = Depends(get_db),
):
    """Log time against an entry."""
    service = TimeRecordService(db)
    record = await service.create(
        entry_id=data.entry_id,
        duration=data.duration,
        date=data.date,
        note=data.note,
    )
    return TimeRecordResponse.model_validate(record)


@router.put("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def update_time_record(
    request: Request,
    record_id: int,
    data: TimeRecordUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace a time record's duration, date and note."""
    service = TimeRecordService(db)
    await service.update(record_id, duration=data.duration, date=data.date, note=data.note)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def delete_time_record(
    request: Request,
    record_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a time record."""
    service = TimeRecordService(db)
    await service.delete(record_id)
