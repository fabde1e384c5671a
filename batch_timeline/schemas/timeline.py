"""Pydantic schemas for computed timeline responses."""

from datetime import date

from pydantic import BaseModel

from batch_timeline.domain.services.timeline import BatchSnapshot
from batch_timeline.domain.value_objects import Stage
from batch_timeline.schemas.records import BaseRecordRow, DailyRecordRow


class SnapshotResponse(BaseModel):
    """Response schema for one computed batch."""

    index: int
    batch_id: str
    mate_date: date
    farrow_date: date
    age_days: int
    week_index: int
    stage: Stage
    unit: str
    inventory: int
    gilt_inventory: int
    is_landed: bool
    is_half_landed: bool
    is_theoretical: bool
    is_closed: bool
    base: BaseRecordRow | None
    records: list[DailyRecordRow]

    @classmethod
    def from_snapshot(cls, snapshot: BatchSnapshot) -> "SnapshotResponse":
        return cls(
            index=snapshot.index,
            batch_id=snapshot.batch_id,
            mate_date=snapshot.mate_date,
            farrow_date=snapshot.farrow_date,
            age_days=snapshot.age_days,
            week_index=snapshot.week_index,
            stage=snapshot.stage,
            unit=snapshot.unit,
            inventory=snapshot.inventory,
            gilt_inventory=snapshot.gilt_inventory,
            is_landed=snapshot.is_landed,
            is_half_landed=snapshot.is_half_landed,
            is_theoretical=snapshot.is_theoretical,
            is_closed=snapshot.is_closed,
            base=BaseRecordRow.model_validate(snapshot.base) if snapshot.base else None,
            records=[DailyRecordRow.model_validate(r) for r in snapshot.records],
        )


class TimelineResponse(BaseModel):
    """Response schema for the batch window around a date."""

    farm_id: str
    as_of: date
    batches: list[SnapshotResponse]
    total_inventory: int
    total_gilt_inventory: int
