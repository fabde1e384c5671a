"""API endpoints for importing and exporting the record collections."""

from fastapi import APIRouter, HTTPException, Query, status

from batch_timeline.api.v1.dependencies import RecordServiceDep
from batch_timeline.domain.exceptions import ImportValidationError
from batch_timeline.schemas.transfer import (
    ExportResponse,
    ImportMode,
    ImportRequest,
    ImportResponse,
)

router = APIRouter(prefix="/transfer", tags=["transfer"])


@router.post("/import", response_model=ImportResponse)
def import_records(
    payload: ImportRequest,
    service: RecordServiceDep,
    mode: ImportMode = Query(ImportMode.MERGE, description="merge (upsert per key) or restore (replace)"),
) -> ImportResponse:
    """Merge or restore base records, daily records and overrides."""
    try:
        summary = service.import_records(
            mode,
            bases=payload.bases,
            records=payload.records,
            overrides=payload.overrides,
        )
    except ImportValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), "errors": e.errors},
        )

    return ImportResponse(
        mode=summary.mode,
        created=summary.created,
        updated=summary.updated,
        skipped=summary.skipped,
        errors=summary.errors,
    )


@router.get("/export", response_model=ExportResponse)
def export_records(service: RecordServiceDep) -> ExportResponse:
    """Back up every record collection."""
    return ExportResponse(**service.export_records())
