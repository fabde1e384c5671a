"""
Batch timeline engine.

Derives a snapshot of the batches around a reference date from the farm
configuration, the sparse base records, the daily adjustment log and the
housing overrides. Every call is a full recomputation with no I/O and no
retained state.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from batch_timeline.domain.exceptions import ReferenceDateOutOfRangeError
from batch_timeline.domain.farm_config import BiologicalProfile, FarmConfig, RotationProfile
from batch_timeline.domain.models import BaseRecord, DailyRecord, HousingOverride
from batch_timeline.domain.value_objects import Stage

WINDOW_BEFORE = 12
WINDOW_AFTER = 7
UNASSIGNED_UNIT = "unassigned"


@dataclass(frozen=True)
class EnumeratedBatch:
    """A batch position in the rotation with its calendar-derived dates."""

    index: int
    batch_id: str
    theoretical_farrow_date: date
    theoretical_mate_date: date


@dataclass(frozen=True)
class BatchSnapshot:
    """Computed state of one batch as of the reference date."""

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
    base: Optional[BaseRecord]
    records: Tuple[DailyRecord, ...]


# --------------------------------------------------------------------------- #
# Batch enumeration                                                            #
# --------------------------------------------------------------------------- #


def center_index(reference_date: date, config: FarmConfig) -> int:
    """Whole intervals from the anchor farrowing to the reference date, floored."""
    return (reference_date - config.anchor_farrow_date).days // config.interval_days


def enumerate_batches(reference_date: date, config: FarmConfig) -> List[EnumeratedBatch]:
    """
    List the batches in view for a reference date.

    Args:
        reference_date: Date the timeline is computed for
        config: Farm configuration

    Returns:
        Batches from center-12 to center+7 inclusive, in index order

    Raises:
        ReferenceDateOutOfRangeError: If a batch date in the window lies
            outside the range of ``datetime.date``
    """
    center = center_index(reference_date, config)
    gestation = timedelta(days=config.biological.gestation_days)

    batches = []
    for index in range(center - WINDOW_BEFORE, center + WINDOW_AFTER + 1):
        try:
            farrow = config.anchor_farrow_date + timedelta(days=index * config.interval_days)
            mate = farrow - gestation
        except OverflowError as e:
            raise ReferenceDateOutOfRangeError(reference_date) from e
        batch_id = config.anchor_batch_id.shifted(index, config.batches_per_year)
        batches.append(
            EnumeratedBatch(
                index=index,
                batch_id=str(batch_id),
                theoretical_farrow_date=farrow,
                theoretical_mate_date=mate,
            )
        )
    return batches


# --------------------------------------------------------------------------- #
# Stage & inventory                                                            #
# --------------------------------------------------------------------------- #


def resolve_farrow_date(batch: EnumeratedBatch, base: Optional[BaseRecord]) -> date:
    if base is not None and base.farrow_date is not None:
        return base.farrow_date
    return batch.theoretical_farrow_date


def resolve_mate_date(batch: EnumeratedBatch, base: Optional[BaseRecord]) -> date:
    if base is not None and base.mate_date is not None:
        return base.mate_date
    return batch.theoretical_mate_date


def _qty(base: Optional[BaseRecord], *fields: str) -> int:
    """First non-zero quantity among ``fields`` on the base record, else 0."""
    if base is None:
        return 0
    for name in fields:
        value = getattr(base, name)
        if value:
            return value
    return 0


def baseline_inventory(
    age_days: int,
    base: Optional[BaseRecord],
    profile: BiologicalProfile,
) -> Tuple[int, int]:
    """
    Inventory recorded for the batch's current point in life, before adjustments.

    Returns:
        (inventory, gilt_inventory)
    """
    if age_days < 0:
        return _qty(base, "breed_qty"), 0
    if age_days < profile.lactation_days:
        return _qty(base, "liveborn_qty"), 0

    weaned = _qty(base, "wean_qty", "nursery_in_qty")
    if age_days < profile.gilt_split_day:
        return weaned, 0

    # The split is only realised once real split data has been recorded
    if base is not None and (base.piglet_in_qty is not None or base.gilt_in_qty is not None):
        return base.piglet_in_qty or 0, base.gilt_in_qty or 0
    return weaned, 0


def apply_adjustments(inventory: int, records: Iterable[DailyRecord]) -> int:
    """Subtract every record's deaths and sales from the inventory."""
    return inventory - sum(record.pig_loss_total for record in records)


def resolve_stage(age_days: int, inventory: int, profile: BiologicalProfile) -> Stage:
    if age_days < 0:
        return Stage.MATING
    if inventory <= 0 and age_days > profile.sold_min_age_days:
        return Stage.SOLD
    return profile.stage_for_age(age_days)


def is_closed(stage: Stage, inventory: int, age_days: int, profile: BiologicalProfile) -> bool:
    return stage is Stage.SOLD or (inventory <= 0 and age_days > profile.closed_min_age_days)


# --------------------------------------------------------------------------- #
# Housing                                                                      #
# --------------------------------------------------------------------------- #


def _index_overrides(
    overrides: Sequence[HousingOverride],
) -> Dict[Tuple[str, str], HousingOverride]:
    indexed: Dict[Tuple[str, str], HousingOverride] = {}
    for override in overrides:
        indexed.setdefault((override.batch_id, str(override.stage)), override)
    return indexed


def default_unit(
    batch_id: str,
    stage: Stage,
    index: int,
    rotation: Optional[RotationProfile],
    overrides: Sequence[HousingOverride],
) -> str:
    """
    Rotation default for a batch with no override and no recorded unit.

    The nearest earlier batch whose override re-anchors this stage hands off
    to the next unit in the rotation. The hand-off is a single step no matter
    how many batches lie between the two.
    """
    if rotation is None:
        return UNASSIGNED_UNIT

    anchors = [
        override
        for override in overrides
        if override.stage == stage and override.affects_following and override.batch_id < batch_id
    ]
    if anchors:
        nearest = max(anchors, key=lambda override: override.batch_id)
        return rotation.unit_after(nearest.assigned_unit)

    return rotation.unit_at(abs(index))


def resolve_unit(
    batch_id: str,
    stage: Stage,
    index: int,
    base: Optional[BaseRecord],
    config: FarmConfig,
    overrides: Sequence[HousingOverride],
    overrides_by_key: Optional[Dict[Tuple[str, str], HousingOverride]] = None,
) -> str:
    """
    Housing unit a batch occupies in its current stage.

    Args:
        batch_id: Batch identifier
        stage: Resolved current stage
        index: Enumeration index of the batch
        base: Base record, if the batch has one
        config: Farm configuration
        overrides: Every housing override
        overrides_by_key: Optional pre-built (batch_id, stage) lookup

    Returns:
        The override unit, else the recorded unit, else the rotation default
    """
    lookup = overrides_by_key if overrides_by_key is not None else _index_overrides(overrides)
    override = lookup.get((batch_id, stage.value))
    if override is not None:
        return override.assigned_unit

    if base is not None:
        recorded = base.unit_for(stage)
        if recorded:
            return recorded

    return default_unit(batch_id, stage, index, config.rotation_for(stage), overrides)


# --------------------------------------------------------------------------- #
# Assembly                                                                     #
# --------------------------------------------------------------------------- #


def compute_snapshot(
    reference_date: date,
    config: FarmConfig,
    base_records: Sequence[BaseRecord],
    daily_records: Sequence[DailyRecord],
    overrides: Sequence[HousingOverride],
) -> List[BatchSnapshot]:
    """
    Compute the state of every batch in view on ``reference_date``.

    Args:
        reference_date: Date the timeline is computed for
        config: Farm configuration
        base_records: Observed batch data (sparse)
        daily_records: Daily adjustment events
        overrides: Manual housing assignments

    Returns:
        One snapshot per enumerated batch, in enumeration order
    """
    profile = config.biological

    bases: Dict[str, BaseRecord] = {}
    for base in base_records:
        bases.setdefault(base.batch_id, base)

    records_by_batch: Dict[str, List[DailyRecord]] = defaultdict(list)
    for record in daily_records:
        if record.record_date <= reference_date:
            records_by_batch[record.batch_id].append(record)

    overrides_by_key = _index_overrides(overrides)

    snapshots = []
    for batch in enumerate_batches(reference_date, config):
        base = bases.get(batch.batch_id)
        records = tuple(sorted(records_by_batch.get(batch.batch_id, []), key=lambda r: r.record_date))

        farrow_date = resolve_farrow_date(batch, base)
        age_days = (reference_date - farrow_date).days

        inventory, gilt_inventory = baseline_inventory(age_days, base, profile)
        inventory = apply_adjustments(inventory, records)

        stage = resolve_stage(age_days, inventory, profile)
        unit = resolve_unit(
            batch.batch_id,
            stage,
            batch.index,
            base,
            config,
            overrides,
            overrides_by_key,
        )

        has_farrow = base is not None and base.farrow_date is not None
        snapshots.append(
            BatchSnapshot(
                index=batch.index,
                batch_id=batch.batch_id,
                mate_date=resolve_mate_date(batch, base),
                farrow_date=farrow_date,
                age_days=age_days,
                week_index=age_days // 7,
                stage=stage,
                unit=unit,
                inventory=inventory,
                gilt_inventory=gilt_inventory,
                is_landed=has_farrow and bool(base.wean_qty),
                is_half_landed=has_farrow and not base.wean_qty,
                is_theoretical=base is None,
                is_closed=is_closed(stage, inventory, age_days, profile),
                base=base,
                records=records,
            )
        )

    return snapshots
