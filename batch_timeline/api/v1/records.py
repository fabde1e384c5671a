"""API endpoints for base records, daily records and housing overrides."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Response, status

from batch_timeline.api.v1.dependencies import RecordServiceDep
from batch_timeline.domain.exceptions import InvalidBatchIdError, RecordNotFoundError
from batch_timeline.domain.value_objects import Stage
from batch_timeline.schemas.records import (
    BaseRecordFields,
    BaseRecordListResponse,
    BaseRecordResponse,
    DailyRecordFields,
    DailyRecordListResponse,
    DailyRecordResponse,
    OverrideFields,
    OverrideListResponse,
    OverrideResponse,
)

router = APIRouter(tags=["records"])


def _upsert_status(response: Response, created: bool) -> None:
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK


# --------------------------------------------------------------------------- #
# Base records                                                                 #
# --------------------------------------------------------------------------- #


@router.get("/base-records", response_model=BaseRecordListResponse)
def list_base_records(service: RecordServiceDep) -> BaseRecordListResponse:
    """List every base record."""
    records = service.list_base_records()
    return BaseRecordListResponse(
        base_records=[BaseRecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get("/base-records/{batch_id}", response_model=BaseRecordResponse)
def get_base_record(batch_id: str, service: RecordServiceDep) -> BaseRecordResponse:
    """Retrieve a base record by batch id."""
    try:
        return BaseRecordResponse.model_validate(service.get_base_record(batch_id))
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


@router.put("/base-records/{batch_id}", response_model=BaseRecordResponse)
def put_base_record(
    batch_id: str,
    fields: BaseRecordFields,
    response: Response,
    service: RecordServiceDep,
) -> BaseRecordResponse:
    """Create or replace a batch's base record (201 when created)."""
    try:
        record, created = service.save_base_record(batch_id, fields.model_dump())
        _upsert_status(response, created)
        return BaseRecordResponse.model_validate(record)

    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


# --------------------------------------------------------------------------- #
# Daily records                                                                #
# --------------------------------------------------------------------------- #


@router.get("/daily-records", response_model=DailyRecordListResponse)
def list_daily_records(
    service: RecordServiceDep,
    batch_id: str | None = Query(None, description="Only records for this batch"),
) -> DailyRecordListResponse:
    """List daily records ordered by date."""
    try:
        records = service.list_daily_records(batch_id=batch_id)
    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return DailyRecordListResponse(
        daily_records=[DailyRecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.put("/daily-records/{batch_id}/{record_date}", response_model=DailyRecordResponse)
def put_daily_record(
    batch_id: str,
    record_date: date,
    fields: DailyRecordFields,
    response: Response,
    service: RecordServiceDep,
) -> DailyRecordResponse:
    """
    Record events for a batch on a day.

    Only the fields present in the body are written; they replace any
    value already stored for that day.
    """
    try:
        record, created = service.record_event(
            batch_id,
            record_date,
            fields.model_dump(exclude_unset=True),
        )
        _upsert_status(response, created)
        return DailyRecordResponse.model_validate(record)

    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


@router.delete("/daily-records/{batch_id}/{record_date}", status_code=status.HTTP_204_NO_CONTENT)
def delete_daily_record(batch_id: str, record_date: date, service: RecordServiceDep) -> None:
    """Remove the daily record for a batch and day."""
    try:
        service.delete_daily_record(batch_id, record_date)
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


# --------------------------------------------------------------------------- #
# Housing overrides                                                            #
# --------------------------------------------------------------------------- #


@router.get("/overrides", response_model=OverrideListResponse)
def list_overrides(
    service: RecordServiceDep,
    stage: Stage | None = Query(None, description="Only overrides for this stage"),
) -> OverrideListResponse:
    """List housing overrides."""
    overrides = service.list_overrides(stage=stage)
    return OverrideListResponse(
        overrides=[OverrideResponse.model_validate(o) for o in overrides],
        total=len(overrides),
    )


@router.put("/overrides/{batch_id}/{stage}", response_model=OverrideResponse)
def put_override(
    batch_id: str,
    stage: Stage,
    fields: OverrideFields,
    response: Response,
    service: RecordServiceDep,
) -> OverrideResponse:
    """Assign a housing unit to a batch for one stage (201 when created)."""
    try:
        override, created = service.set_override(
            batch_id,
            stage,
            fields.assigned_unit,
            fields.affects_following,
        )
        _upsert_status(response, created)
        return OverrideResponse.model_validate(override)

    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


@router.delete("/overrides/{batch_id}/{stage}", status_code=status.HTTP_204_NO_CONTENT)
def delete_override(batch_id: str, stage: Stage, service: RecordServiceDep) -> None:
    """Remove a housing override."""
    try:
        service.delete_override(batch_id, stage)
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except InvalidBatchIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
