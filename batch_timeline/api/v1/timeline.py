"""API endpoints for the computed batch timeline and farm configuration."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from batch_timeline.api.v1.dependencies import FarmConfigDep, RecordServiceDep
from batch_timeline.domain.exceptions import (
    BatchNotInWindowError,
    InvalidBatchIdError,
    ReferenceDateOutOfRangeError,
)
from batch_timeline.schemas.farm_config import FarmConfigSchema
from batch_timeline.schemas.timeline import SnapshotResponse, TimelineResponse

router = APIRouter(tags=["timeline"])


@router.get("/timeline", response_model=TimelineResponse)
def get_timeline(
    service: RecordServiceDep,
    as_of: date | None = Query(None, description="Reference date (default: today)"),
) -> TimelineResponse:
    """Compute the 20-batch window around the reference date."""
    reference = as_of or date.today()
    try:
        snapshots = service.build_timeline(reference)
    except ReferenceDateOutOfRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return TimelineResponse(
        farm_id=service.farm_config.farm_id,
        as_of=reference,
        batches=[SnapshotResponse.from_snapshot(s) for s in snapshots],
        total_inventory=sum(s.inventory for s in snapshots),
        total_gilt_inventory=sum(s.gilt_inventory for s in snapshots),
    )


@router.get("/timeline/{batch_id}", response_model=SnapshotResponse)
def get_batch_snapshot(
    batch_id: str,
    service: RecordServiceDep,
    as_of: date | None = Query(None, description="Reference date (default: today)"),
) -> SnapshotResponse:
    """Computed state of one batch in the window."""
    try:
        snapshot = service.get_batch_snapshot(as_of or date.today(), batch_id)
        return SnapshotResponse.from_snapshot(snapshot)
    except (InvalidBatchIdError, ReferenceDateOutOfRangeError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except BatchNotInWindowError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/config", response_model=FarmConfigSchema)
def get_config(farm_config: FarmConfigDep) -> FarmConfigSchema:
    """Current farm configuration."""
    return FarmConfigSchema.from_domain(farm_config)
