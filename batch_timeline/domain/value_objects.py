"""Domain value objects for type-safe business concepts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


_BATCH_ID_PATTERN: re.Pattern[str] = re.compile(r"^(?P<year>\d{4,5})-G(?P<seq>\d{2,3})$")


class Stage(str, Enum):
    """Life-cycle stage of a production batch."""

    MATING = "mating"
    LACTATION = "lactation"
    NURSERY = "nursery"
    PIGLET = "piglet"
    GROWER = "grower"
    FINISHER = "finisher"
    GILT = "gilt"
    SOLD = "sold"

    def __str__(self) -> str:
        return self.value


def shift_sequence(year: int, sequence: int, bucket_size: int, offset: int) -> tuple[int, int]:
    """
    Move a (year, sequence) pair by ``offset`` batches.

    Sequence numbers run 1..bucket_size inside a year; moving past either end
    rolls into the next or previous year.

    Args:
        year: Calendar year of the starting batch
        sequence: 1-based sequence number within the year
        bucket_size: Number of batches per year
        offset: Batches to move (negative moves backwards)

    Returns:
        The shifted (year, sequence) pair
    """
    if bucket_size < 1:
        raise ValueError(f"Bucket size must be positive: {bucket_size}")

    year_delta, zero_based = divmod(sequence - 1 + offset, bucket_size)
    return year + year_delta, zero_based + 1


@dataclass(frozen=True)
class BatchId:
    """
    Immutable value object for a batch identifier.

    Enforces the pattern YYYY-GNN at construction time. Zero padding keeps
    string ordering equal to chronological ordering within a year bucket.
    Batch years run ahead of calendar years (a bucket of 17 batches every 21
    days spans 357 days), so the year is not capped at four digits.
    """

    year: int
    sequence: int

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise ValueError(f"Batch sequence must be positive: {self.sequence}")

    @classmethod
    def parse(cls, value: str) -> BatchId:
        """Build a BatchId from its display form, e.g. ``2025-G11``."""
        match = _BATCH_ID_PATTERN.match(value)
        if not match:
            raise ValueError(
                f"Invalid batch id format: '{value}'. Expected format: YYYY-GNN",
            )
        return cls(year=int(match.group("year")), sequence=int(match.group("seq")))

    def shifted(self, offset: int, bucket_size: int) -> BatchId:
        """Return the batch ``offset`` positions away in the rotation."""
        year, sequence = shift_sequence(self.year, self.sequence, bucket_size, offset)
        return BatchId(year=year, sequence=sequence)

    def __str__(self) -> str:
        return f"{self.year:04d}-G{self.sequence:02d}"


@dataclass(frozen=True)
class DayRange:
    """
    Half-open age window [from_day, to_day) mapped to a stage.
    """

    stage: Stage
    from_day: int
    to_day: int

    def __post_init__(self) -> None:
        if self.from_day < 0:
            raise ValueError(f"Stage range cannot start before day 0: {self.from_day}")
        if self.from_day >= self.to_day:
            raise ValueError(
                f"Stage range for {self.stage} is empty or reversed: "
                f"[{self.from_day}, {self.to_day})",
            )

    def contains(self, age_days: int) -> bool:
        return self.from_day <= age_days < self.to_day

    def __str__(self) -> str:
        return f"{self.stage}[{self.from_day}, {self.to_day})"
