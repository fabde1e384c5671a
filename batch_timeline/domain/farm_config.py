"""Immutable farm configuration threaded through every timeline computation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping

from batch_timeline.domain.exceptions import InvalidFarmConfigError
from batch_timeline.domain.value_objects import BatchId, DayRange, Stage


@dataclass(frozen=True)
class RotationProfile:
    """
    Ordered housing units a stage cycles through.

    Business Rules:
    - units must be non-empty and unique
    - seed_unit must be one of units
    """

    units: tuple[str, ...]
    seed_unit: str

    def __post_init__(self) -> None:
        if not self.units:
            raise InvalidFarmConfigError("rotation profile has no units")
        if len(set(self.units)) != len(self.units):
            raise InvalidFarmConfigError(f"rotation units are not unique: {list(self.units)}")
        if self.seed_unit not in self.units:
            raise InvalidFarmConfigError(
                f"seed unit '{self.seed_unit}' is not in rotation {list(self.units)}"
            )

    @property
    def seed_index(self) -> int:
        return self.units.index(self.seed_unit)

    def unit_at(self, steps_from_seed: int) -> str:
        """Unit reached after ``steps_from_seed`` rotation steps from the seed."""
        return self.units[(self.seed_index + steps_from_seed) % len(self.units)]

    def unit_after(self, unit: str) -> str:
        """
        Unit following ``unit`` in the rotation, wrapping at the end.

        A unit outside the rotation restarts the cycle at the first unit.
        """
        position = self.units.index(unit) if unit in self.units else -1
        return self.units[(position + 1) % len(self.units)]


@dataclass(frozen=True)
class BiologicalProfile:
    """
    Biological timings and the age-to-stage table.

    closed_min_age_days and sold_min_age_days are separate thresholds: a batch
    with no inventory left is reported closed after the first, and its stage
    is forced to SOLD only after the second.
    """

    gestation_days: int
    lactation_days: int
    gilt_split_day: int
    stage_ranges: tuple[DayRange, ...]
    closed_min_age_days: int = 100
    sold_min_age_days: int = 150

    def __post_init__(self) -> None:
        if self.gestation_days <= 0:
            raise InvalidFarmConfigError(f"gestation days must be positive: {self.gestation_days}")
        if self.lactation_days <= 0:
            raise InvalidFarmConfigError(f"lactation days must be positive: {self.lactation_days}")
        if self.gilt_split_day < self.lactation_days:
            raise InvalidFarmConfigError(
                f"gilt split day {self.gilt_split_day} precedes weaning at day {self.lactation_days}"
            )
        if not self.stage_ranges:
            raise InvalidFarmConfigError("stage range table is empty")

        for previous, current in zip(self.stage_ranges, self.stage_ranges[1:]):
            if current.from_day < previous.to_day:
                raise InvalidFarmConfigError(
                    f"stage ranges overlap or are out of order: {previous} then {current}"
                )

    @property
    def final_stage(self) -> Stage:
        return self.stage_ranges[-1].stage

    def stage_for_age(self, age_days: int) -> Stage:
        """Calendar stage for a non-negative age; ages past the table map to the final stage."""
        for day_range in self.stage_ranges:
            if day_range.contains(age_days):
                return day_range.stage
        return self.final_stage


@dataclass(frozen=True)
class FarmConfig:
    """
    Process-wide farm configuration.

    The anchor batch and its farrowing date calibrate every theoretical date;
    batches_per_year is the size of the yearly batch-number bucket.
    """

    farm_id: str
    interval_days: int
    anchor_batch_id: BatchId
    anchor_farrow_date: date
    biological: BiologicalProfile
    rotations: Mapping[Stage, RotationProfile] = field(default_factory=dict)
    batches_per_year: int = 17

    def __post_init__(self) -> None:
        if self.interval_days <= 0:
            raise InvalidFarmConfigError(f"batch interval must be positive: {self.interval_days}")
        if self.batches_per_year < 1:
            raise InvalidFarmConfigError(
                f"batches per year must be positive: {self.batches_per_year}"
            )
        if self.anchor_batch_id.sequence > self.batches_per_year:
            raise InvalidFarmConfigError(
                f"anchor batch {self.anchor_batch_id} exceeds "
                f"{self.batches_per_year} batches per year"
            )
        # Freeze the rotation table along with the dataclass itself
        object.__setattr__(self, "rotations", MappingProxyType(dict(self.rotations)))

    def rotation_for(self, stage: Stage) -> RotationProfile | None:
        return self.rotations.get(stage)
