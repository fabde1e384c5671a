"""Pydantic schemas for loading and presenting the farm configuration."""

import json
from datetime import date
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from batch_timeline.domain.exceptions import InvalidFarmConfigError
from batch_timeline.domain.farm_config import BiologicalProfile, FarmConfig, RotationProfile
from batch_timeline.domain.value_objects import BatchId, DayRange, Stage


class StageRangeSchema(BaseModel):
    """One row of the age-to-stage table."""

    stage: Stage
    from_day: int
    to_day: int


class BiologicalSchema(BaseModel):
    """Biological timings with the default production profile."""

    gestation_days: int = 115
    lactation_days: int = 28
    gilt_split_day: int = 77
    closed_min_age_days: int = 100
    sold_min_age_days: int = 150
    stages: list[StageRangeSchema] = Field(
        default_factory=lambda: [
            StageRangeSchema(stage=Stage.LACTATION, from_day=0, to_day=28),
            StageRangeSchema(stage=Stage.NURSERY, from_day=28, to_day=77),
            StageRangeSchema(stage=Stage.PIGLET, from_day=77, to_day=133),
            StageRangeSchema(stage=Stage.GROWER, from_day=133, to_day=168),
            StageRangeSchema(stage=Stage.FINISHER, from_day=168, to_day=9999),
        ]
    )


class RotationSchema(BaseModel):
    units: list[str]
    seed_unit: str


def _default_rotations() -> dict[Stage, RotationSchema]:
    return {
        Stage.NURSERY: RotationSchema(units=["N1", "N2", "N3"], seed_unit="N1"),
        Stage.PIGLET: RotationSchema(units=["P1", "P2", "P3"], seed_unit="P1"),
        Stage.GROWER: RotationSchema(units=["G1", "G2"], seed_unit="G1"),
        Stage.FINISHER: RotationSchema(units=["F1", "F2"], seed_unit="F1"),
    }


class FarmConfigSchema(BaseModel):
    """
    Wire form of the farm configuration.

    Every field has a default, so an empty document yields the built-in
    configuration.
    """

    farm_id: str = "YL"
    interval_days: int = 21
    anchor_batch_id: str = Field(default="2025-G11", examples=["2025-G11"])
    anchor_farrow_date: date = date(2025, 5, 24)
    batches_per_year: int = 17
    biological: BiologicalSchema = Field(default_factory=BiologicalSchema)
    rotations: dict[Stage, RotationSchema] = Field(default_factory=_default_rotations)

    def to_domain(self) -> FarmConfig:
        """
        Build the immutable FarmConfig.

        Raises:
            InvalidFarmConfigError: If any business rule is violated
        """
        try:
            ranges = tuple(
                DayRange(stage=row.stage, from_day=row.from_day, to_day=row.to_day)
                for row in self.biological.stages
            )
            biological = BiologicalProfile(
                gestation_days=self.biological.gestation_days,
                lactation_days=self.biological.lactation_days,
                gilt_split_day=self.biological.gilt_split_day,
                stage_ranges=ranges,
                closed_min_age_days=self.biological.closed_min_age_days,
                sold_min_age_days=self.biological.sold_min_age_days,
            )
            rotations = {
                stage: RotationProfile(units=tuple(rotation.units), seed_unit=rotation.seed_unit)
                for stage, rotation in self.rotations.items()
            }
            return FarmConfig(
                farm_id=self.farm_id,
                interval_days=self.interval_days,
                anchor_batch_id=BatchId.parse(self.anchor_batch_id),
                anchor_farrow_date=self.anchor_farrow_date,
                biological=biological,
                rotations=rotations,
                batches_per_year=self.batches_per_year,
            )
        except InvalidFarmConfigError:
            raise
        except ValueError as e:
            raise InvalidFarmConfigError(str(e)) from e

    @classmethod
    def from_domain(cls, config: FarmConfig) -> "FarmConfigSchema":
        profile = config.biological
        return cls(
            farm_id=config.farm_id,
            interval_days=config.interval_days,
            anchor_batch_id=str(config.anchor_batch_id),
            anchor_farrow_date=config.anchor_farrow_date,
            batches_per_year=config.batches_per_year,
            biological=BiologicalSchema(
                gestation_days=profile.gestation_days,
                lactation_days=profile.lactation_days,
                gilt_split_day=profile.gilt_split_day,
                closed_min_age_days=profile.closed_min_age_days,
                sold_min_age_days=profile.sold_min_age_days,
                stages=[
                    StageRangeSchema(stage=r.stage, from_day=r.from_day, to_day=r.to_day)
                    for r in profile.stage_ranges
                ],
            ),
            rotations={
                stage: RotationSchema(units=list(rotation.units), seed_unit=rotation.seed_unit)
                for stage, rotation in config.rotations.items()
            },
        )


def parse_farm_config(data: Mapping[str, Any]) -> FarmConfig:
    """
    Validate raw configuration data and build a FarmConfig.

    Raises:
        InvalidFarmConfigError: On unparseable values or violated business rules
    """
    try:
        schema = FarmConfigSchema.model_validate(data)
    except ValidationError as e:
        raise InvalidFarmConfigError(str(e)) from e
    return schema.to_domain()


def load_farm_config_file(path: str | Path) -> FarmConfig:
    """Read a JSON farm configuration file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidFarmConfigError(f"cannot read {path}: {e}") from e
    return parse_farm_config(data)
