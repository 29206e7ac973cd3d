"""API router aggregation."""

from fastapi import APIRouter

from timeloop.api.categories import router as categories_router
from timeloop.api.entries import router as entries_router
from timeloop.api.time_records import router as time_records_router
from timeloop.api.totals import router as totals_router
from timeloop.api.totals import periods_router

router = APIRouter(prefix="/api")

router.include_router(categories_router)
router.include_router(entries_router)
router.include_router(time_records_router)
router.include_router(totals_router)
router.include_router(periods_router)
