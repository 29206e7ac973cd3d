"""Entry API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.api.limiter import limiter, mutation_rate_limit
from timeloop.api.params import window_param
from timeloop.config import get_settings
from timeloop.database import get_db
from timeloop.periods import DateRange, Period
from timeloop.schemas.entry import (
    EntryCreate,
    EntryUpdate,
    EntryResponse,
    BatchAssignCategory,
    BatchDelete,
)
from timeloop.schemas.time_record import TimeRecordResponse
from timeloop.services.tracking_service import EntryService, TimeRecordService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=list[EntryResponse])
async def list_entries(
    window: DateRange | None = Depends(window_param(Period.ALL)),
    db: AsyncSession = Depends(get_db),
):
    """List entries, optionally only those with time logged in a period."""
    service = EntryService(db)
    entries = await service.get_all(window)
    return [EntryResponse.model_validate(e) for e in entries]


@router.get("/search", response_model=list[EntryResponse])
async def search_entries(
    q: str = Query(..., min_length=1, description="Part of the title"),
    db: AsyncSession = Depends(get_db),
):
    """Find entries by title for the create-or-select box."""
    service = EntryService(db)
    entries = await service.search(q, limit=get_settings().search_limit)
    return [EntryResponse.model_validate(e) for e in entries]


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_rate_limit)
async def create_entry(
    request: Request,
    data: EntryCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new entry."""
    service = EntryService(db)
    entry = await service.create(data.title, data.category_id)
    return EntryResponse.model_validate(entry)


@router.post("/batch/assign-category", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def assign_category(
    request: Request,
    data: BatchAssignCategory,
    db: AsyncSession = Depends(get_db),
):
    """Set (or clear) the category of several entries."""
    service = EntryService(db)
    await service.assign_category(data.entry_ids, data.category_id)


@router.post("/batch/delete", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def delete_entries(
    request: Request,
    data: BatchDelete,
    db: AsyncSession = Depends(get_db),
):
    """Delete several entries and their time records."""
    service = EntryService(db)
    await service.delete_many(data.entry_ids)


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an entry by ID."""
    service = EntryService(db)
    entry = await service.get_by_id(entry_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found",
        )
    return EntryResponse.model_validate(entry)


@router.put("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def update_entry(
    request: Request,
    entry_id: int,
    data: EntryUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace an entry's title and category."""
    service = EntryService(db)
    await service.update(entry_id, data.title, data.category_id)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def delete_entry(
    request: Request,
    entry_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete an entry and its time records."""
    service = EntryService(db)
    await service.delete(entry_id)


@router.get("/{entry_id}/time-records", response_model=list[TimeRecordResponse])
async def list_entry_time_records(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
):
    """List the time logged against one entry, newest first."""
    service = TimeRecordService(db)
    records = await service.get_for_entry(entry_id)
    return [TimeRecordResponse.model_validate(r) for r in records]
