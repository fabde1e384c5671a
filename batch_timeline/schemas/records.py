"""Pydantic schemas for base record, daily record and override requests and responses."""

from datetime import date, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from batch_timeline.domain.value_objects import BatchId, Stage


def _canonical_batch_id(value: str) -> str:
    """Validate YYYY-GNN and return it in canonical zero-padded form."""
    return str(BatchId.parse(value))


BatchIdStr = Annotated[
    str,
    AfterValidator(_canonical_batch_id),
    Field(description="Batch identifier (format: YYYY-GNN)", examples=["2025-G11"]),
]


class BaseRecordFields(BaseModel):
    """Observed batch data; every field is optional."""

    mate_date: date | None = None
    farrow_date: date | None = None
    breed_qty: int | None = Field(default=None, ge=0)
    expected_farrow_qty: int | None = Field(default=None, ge=0)
    liveborn_qty: int | None = Field(default=None, ge=0)
    wean_qty: int | None = Field(default=None, ge=0)
    nursery_in_qty: int | None = Field(default=None, ge=0)
    piglet_in_qty: int | None = Field(default=None, ge=0)
    grower_in_qty: int | None = Field(default=None, ge=0)
    finisher_in_qty: int | None = Field(default=None, ge=0)
    gilt_in_qty: int | None = Field(default=None, ge=0)
    sale_total_qty: int | None = Field(default=None, ge=0)
    nursery_unit: str | None = Field(default=None, max_length=50)
    piglet_unit: str | None = Field(default=None, max_length=50)
    grower_unit: str | None = Field(default=None, max_length=50)
    finisher_unit: str | None = Field(default=None, max_length=50)


class BaseRecordRow(BaseRecordFields):
    """Base record keyed by batch id (import/export row)."""

    batch_id: BatchIdStr

    model_config = {"from_attributes": True}


class BaseRecordResponse(BaseRecordRow):
    id: int
    created_at: datetime
    updated_at: datetime


class BaseRecordListResponse(BaseModel):
    base_records: list[BaseRecordResponse]
    total: int


class DailyRecordFields(BaseModel):
    """Events for one batch on one day. Supplied fields overwrite stored ones."""

    pig_death_qty: int | None = Field(default=None, ge=0, description="Pigs died")
    pig_sale_qty: int | None = Field(default=None, ge=0, description="Pigs sold")
    pig_sale_avg_weight_kg: float | None = Field(default=None, ge=0, description="Average sale weight")
    sow_abortion_qty: int | None = Field(default=None, ge=0, description="Sow abortions")
    sow_loss_qty: int | None = Field(default=None, ge=0, description="Sows lost")


class DailyRecordRow(DailyRecordFields):
    """Daily record keyed by (batch id, date) (import/export row)."""

    batch_id: BatchIdStr
    record_date: date

    model_config = {"from_attributes": True}


class DailyRecordResponse(DailyRecordRow):
    id: int
    updated_at: datetime


class DailyRecordListResponse(BaseModel):
    daily_records: list[DailyRecordResponse]
    total: int


class OverrideFields(BaseModel):
    """Manual housing assignment."""

    assigned_unit: str = Field(min_length=1, max_length=50, description="Housing unit name")
    affects_following: bool = Field(
        default=False,
        description="Re-anchor the rotation for every later batch in this stage",
    )


class OverrideRow(OverrideFields):
    """Override keyed by (batch id, stage) (import/export row)."""

    batch_id: BatchIdStr
    stage: Stage

    model_config = {"from_attributes": True}


class OverrideResponse(OverrideRow):
    id: int
    updated_at: datetime


class OverrideListResponse(BaseModel):
    overrides: list[OverrideResponse]
    total: int
