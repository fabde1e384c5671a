"""Main router aggregator for API v1."""

from fastapi import APIRouter

from batch_timeline.api.v1.records import router as records_router
from batch_timeline.api.v1.timeline import router as timeline_router
from batch_timeline.api.v1.transfer import router as transfer_router

router = APIRouter(prefix="/api")

router.include_router(timeline_router)
router.include_router(records_router)
router.include_router(transfer_router)
