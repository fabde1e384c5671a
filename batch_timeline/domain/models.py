"""SQLModel database models for base records, daily records and housing overrides."""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from batch_timeline.domain.value_objects import Stage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseRecord(SQLModel, table=True):
    """
    Observed data for one real-world batch.

    Business Rules:
    - batch_id is unique and follows YYYY-GNN
    - every date and quantity is optional; missing values fall back to
      calendar arithmetic or zero when the timeline is computed
    - records are never deleted automatically
    """

    __tablename__ = "base_records"

    # Primary Key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Business Identifier
    batch_id: str = Field(
        unique=True,
        index=True,
        max_length=16,
        description="Batch identifier (YYYY-GNN)",
    )

    # Milestone Dates
    mate_date: Optional[date] = Field(default=None, description="Mating date")
    farrow_date: Optional[date] = Field(default=None, description="Farrowing date")

    # Transition Quantities
    breed_qty: Optional[int] = Field(default=None, ge=0, description="Sows bred")
    expected_farrow_qty: Optional[int] = Field(default=None, ge=0, description="Sows expected to farrow")
    liveborn_qty: Optional[int] = Field(default=None, ge=0, description="Piglets born alive")
    wean_qty: Optional[int] = Field(default=None, ge=0, description="Piglets weaned")
    nursery_in_qty: Optional[int] = Field(default=None, ge=0, description="Head entering nursery")
    piglet_in_qty: Optional[int] = Field(default=None, ge=0, description="Head entering piglet pool")
    grower_in_qty: Optional[int] = Field(default=None, ge=0, description="Head entering grower pool")
    finisher_in_qty: Optional[int] = Field(default=None, ge=0, description="Head entering finisher pool")
    gilt_in_qty: Optional[int] = Field(default=None, ge=0, description="Head diverted to breeding stock")
    sale_total_qty: Optional[int] = Field(default=None, ge=0, description="Total head sold")

    # Recorded Housing
    nursery_unit: Optional[str] = Field(default=None, max_length=50)
    piglet_unit: Optional[str] = Field(default=None, max_length=50)
    grower_unit: Optional[str] = Field(default=None, max_length=50)
    finisher_unit: Optional[str] = Field(default=None, max_length=50)

    # Audit Trail
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def unit_for(self, stage: Stage) -> Optional[str]:
        """Recorded housing unit for a housed stage, or None."""
        units = {
            Stage.NURSERY: self.nursery_unit,
            Stage.PIGLET: self.piglet_unit,
            Stage.GROWER: self.grower_unit,
            Stage.FINISHER: self.finisher_unit,
        }
        return units.get(stage) or None


class DailyRecord(SQLModel, table=True):
    """
    Adjustment events recorded for one batch on one calendar day.

    Keyed by (batch_id, record_date); repeated edits on the same day
    overwrite fields instead of adding to them.
    """

    __tablename__ = "daily_records"
    __table_args__ = (
        UniqueConstraint("batch_id", "record_date", name="uq_daily_records_batch_date"),
    )

    # Primary Key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Natural Key
    batch_id: str = Field(index=True, max_length=16)
    record_date: date = Field(index=True)

    # Events
    pig_death_qty: Optional[int] = Field(default=None, ge=0)
    pig_sale_qty: Optional[int] = Field(default=None, ge=0)
    pig_sale_avg_weight_kg: Optional[float] = Field(default=None, ge=0)
    sow_abortion_qty: Optional[int] = Field(default=None, ge=0)
    sow_loss_qty: Optional[int] = Field(default=None, ge=0)

    # Audit Trail
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def pig_loss_total(self) -> int:
        """Head leaving the pig inventory on this day (deaths plus sales)."""
        return (self.pig_death_qty or 0) + (self.pig_sale_qty or 0)


class HousingOverride(SQLModel, table=True):
    """
    Manual housing assignment for one batch in one stage.

    When affects_following is set, the assignment re-anchors the rotation
    for every later batch in the same stage.
    """

    __tablename__ = "housing_overrides"
    __table_args__ = (
        UniqueConstraint("batch_id", "stage", name="uq_housing_overrides_batch_stage"),
    )

    # Primary Key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Natural Key
    batch_id: str = Field(index=True, max_length=16)
    stage: str = Field(index=True, max_length=16)

    # Assignment
    assigned_unit: str = Field(max_length=50)
    affects_following: bool = Field(default=False)

    # Audit Trail
    updated_at: datetime = Field(default_factory=_utcnow)
