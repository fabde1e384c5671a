"""Pydantic schemas for record import and export."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from batch_timeline.schemas.records import BaseRecordRow, DailyRecordRow, OverrideRow


class ImportMode(str, Enum):
    MERGE = "merge"
    RESTORE = "restore"


class ImportRequest(BaseModel):
    """
    Import payload.

    Rows are accepted as raw JSON values and validated one by one, so a
    single bad row, even one that is not an object, can be reported
    without rejecting the rest of a merge. A collection that is omitted
    (null) is left untouched.
    """

    bases: list[Any] | None = None
    records: list[Any] | None = None
    overrides: list[Any] | None = None


class ImportResponse(BaseModel):
    mode: ImportMode
    created: int
    updated: int
    skipped: int
    errors: list[str] = Field(default_factory=list)


class ExportResponse(BaseModel):
    """Full backup of the three record collections."""

    bases: list[BaseRecordRow]
    records: list[DailyRecordRow]
    overrides: list[OverrideRow]
