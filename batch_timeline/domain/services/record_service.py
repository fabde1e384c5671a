"""Business logic layer for record upserts, timeline builds and data transfer."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ValidationError
from sqlmodel import Session

from batch_timeline.domain.exceptions import (
    BatchNotInWindowError,
    ImportValidationError,
    InvalidBatchIdError,
)
from batch_timeline.domain.farm_config import FarmConfig
from batch_timeline.domain.models import BaseRecord, DailyRecord, HousingOverride
from batch_timeline.domain.services.timeline import BatchSnapshot, compute_snapshot
from batch_timeline.domain.value_objects import BatchId, Stage
from batch_timeline.repositories.record_repository import RecordRepository
from batch_timeline.schemas.records import BaseRecordRow, DailyRecordRow, OverrideRow
from batch_timeline.schemas.transfer import ImportMode

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of an import run."""

    mode: ImportMode
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    def count(self, created: bool) -> None:
        if created:
            self.created += 1
        else:
            self.updated += 1


class RecordService:
    """Service layer for the record store and the timeline it feeds."""

    def __init__(self, session: Session, farm_config: FarmConfig):
        self.repository = RecordRepository(session)
        self.farm_config = farm_config

    # ------------------------------------------------------------------ #
    # Timeline                                                             #
    # ------------------------------------------------------------------ #

    def build_timeline(self, as_of: date) -> List[BatchSnapshot]:
        """Compute the batch window for ``as_of`` from the current records."""
        snapshots = compute_snapshot(
            as_of,
            self.farm_config,
            self.repository.list_base_records(),
            self.repository.list_daily_records(),
            self.repository.list_overrides(),
        )
        logger.debug(
            "Built timeline",
            extra={"as_of": as_of.isoformat(), "batches": len(snapshots)},
        )
        return snapshots

    def get_batch_snapshot(self, as_of: date, batch_id: str) -> BatchSnapshot:
        """
        Snapshot of a single batch.

        Raises:
            InvalidBatchIdError: If batch_id is not YYYY-GNN
            BatchNotInWindowError: If the batch is outside the window for ``as_of``
        """
        batch_id = _normalize_batch_id(batch_id)
        for snapshot in self.build_timeline(as_of):
            if snapshot.batch_id == batch_id:
                return snapshot
        raise BatchNotInWindowError(batch_id=batch_id, as_of=as_of)

    # ------------------------------------------------------------------ #
    # Record upserts                                                       #
    # ------------------------------------------------------------------ #

    def save_base_record(self, batch_id: str, fields: Mapping[str, Any]) -> Tuple[BaseRecord, bool]:
        """
        Create or replace a batch's base record.

        Raises:
            InvalidBatchIdError: If batch_id is not YYYY-GNN
        """
        batch_id = _normalize_batch_id(batch_id)
        record, created = self.repository.upsert_base_record(batch_id, fields)
        logger.info(
            "Base record %s",
            "created" if created else "updated",
            extra={"batch_id": batch_id},
        )
        return record, created

    def get_base_record(self, batch_id: str) -> BaseRecord:
        return self.repository.get_base_record(_normalize_batch_id(batch_id))

    def list_base_records(self) -> List[BaseRecord]:
        return self.repository.list_base_records()

    def record_event(
        self,
        batch_id: str,
        record_date: date,
        fields: Mapping[str, Any],
    ) -> Tuple[DailyRecord, bool]:
        """Upsert the daily record for (batch_id, record_date), merging fields."""
        batch_id = _normalize_batch_id(batch_id)
        record, created = self.repository.upsert_daily_record(batch_id, record_date, fields)
        logger.info(
            "Daily record %s",
            "created" if created else "updated",
            extra={"batch_id": batch_id, "record_date": record_date.isoformat(), "fields": sorted(fields)},
        )
        return record, created

    def list_daily_records(self, batch_id: Optional[str] = None) -> List[DailyRecord]:
        if batch_id is not None:
            batch_id = _normalize_batch_id(batch_id)
        return self.repository.list_daily_records(batch_id=batch_id)

    def delete_daily_record(self, batch_id: str, record_date: date) -> None:
        self.repository.delete_daily_record(_normalize_batch_id(batch_id), record_date)

    def set_override(
        self,
        batch_id: str,
        stage: Stage,
        assigned_unit: str,
        affects_following: bool = False,
    ) -> Tuple[HousingOverride, bool]:
        """Upsert the housing override for (batch_id, stage)."""
        batch_id = _normalize_batch_id(batch_id)
        override, created = self.repository.upsert_override(
            batch_id=batch_id,
            stage=stage.value,
            assigned_unit=assigned_unit,
            affects_following=affects_following,
        )
        logger.info(
            "Override %s",
            "created" if created else "updated",
            extra={
                "batch_id": batch_id,
                "stage": stage.value,
                "unit": assigned_unit,
                "affects_following": affects_following,
            },
        )
        return override, created

    def list_overrides(self, stage: Optional[Stage] = None) -> List[HousingOverride]:
        return self.repository.list_overrides(stage=stage.value if stage else None)

    def delete_override(self, batch_id: str, stage: Stage) -> None:
        self.repository.delete_override(_normalize_batch_id(batch_id), stage.value)

    # ------------------------------------------------------------------ #
    # Import / export                                                      #
    # ------------------------------------------------------------------ #

    def import_records(
        self,
        mode: ImportMode,
        bases: Optional[Sequence[Any]] = None,
        records: Optional[Sequence[Any]] = None,
        overrides: Optional[Sequence[Any]] = None,
    ) -> ImportSummary:
        """
        Apply an import payload.

        MERGE upserts row by row; rows that fail validation are skipped and
        reported. RESTORE validates everything up front and then swaps the
        supplied collections in one transaction.

        Raises:
            ImportValidationError: RESTORE payload has invalid rows
        """
        summary = ImportSummary(mode=mode)
        base_rows = _validate_rows(BaseRecordRow, "bases", bases, summary)
        record_rows = _validate_rows(DailyRecordRow, "records", records, summary)
        override_rows = _validate_rows(OverrideRow, "overrides", overrides, summary)

        if mode is ImportMode.RESTORE:
            if summary.errors:
                raise ImportValidationError(summary.errors)
            summary.created = self._restore(bases, base_rows, records, record_rows, overrides, override_rows)
        else:
            self._merge(base_rows, record_rows, override_rows, summary)

        logger.info(
            "Import finished",
            extra={
                "mode": mode.value,
                "created_count": summary.created,
                "updated_count": summary.updated,
                "skipped_count": summary.skipped,
            },
        )
        return summary

    def export_records(self) -> Dict[str, List[BaseModel]]:
        return {
            "bases": [BaseRecordRow.model_validate(r) for r in self.repository.list_base_records()],
            "records": [DailyRecordRow.model_validate(r) for r in self.repository.list_daily_records()],
            "overrides": [OverrideRow.model_validate(o) for o in self.repository.list_overrides()],
        }

    def _merge(
        self,
        base_rows: List[BaseRecordRow],
        record_rows: List[DailyRecordRow],
        override_rows: List[OverrideRow],
        summary: ImportSummary,
    ) -> None:
        for row in base_rows:
            _, created = self.repository.upsert_base_record(
                row.batch_id, row.model_dump(exclude={"batch_id"})
            )
            summary.count(created)
        for row in record_rows:
            _, created = self.repository.upsert_daily_record(
                row.batch_id,
                row.record_date,
                row.model_dump(exclude={"batch_id", "record_date"}, exclude_unset=True),
            )
            summary.count(created)
        for row in override_rows:
            _, created = self.repository.upsert_override(
                batch_id=row.batch_id,
                stage=row.stage.value,
                assigned_unit=row.assigned_unit,
                affects_following=row.affects_following,
            )
            summary.count(created)

    def _restore(
        self,
        bases: Optional[Sequence[Any]],
        base_rows: List[BaseRecordRow],
        records: Optional[Sequence[Any]],
        record_rows: List[DailyRecordRow],
        overrides: Optional[Sequence[Any]],
        override_rows: List[OverrideRow],
    ) -> int:
        # Later rows win when a payload repeats a key
        new_bases = {row.batch_id: BaseRecord(**row.model_dump()) for row in base_rows}
        new_records = {
            (row.batch_id, row.record_date): DailyRecord(**row.model_dump()) for row in record_rows
        }
        new_overrides = {
            (row.batch_id, row.stage.value): HousingOverride(
                batch_id=row.batch_id,
                stage=row.stage.value,
                assigned_unit=row.assigned_unit,
                affects_following=row.affects_following,
            )
            for row in override_rows
        }
        return self.repository.replace_all(
            bases=list(new_bases.values()) if bases is not None else None,
            records=list(new_records.values()) if records is not None else None,
            overrides=list(new_overrides.values()) if overrides is not None else None,
        )


def _normalize_batch_id(batch_id: str) -> str:
    try:
        return str(BatchId.parse(batch_id))
    except ValueError:
        raise InvalidBatchIdError(batch_id=batch_id)


def _validate_rows(
    schema: Type[BaseModel],
    collection: str,
    rows: Optional[Sequence[Any]],
    summary: ImportSummary,
) -> List[BaseModel]:
    valid: List[BaseModel] = []
    for position, raw in enumerate(rows or []):
        try:
            valid.append(schema.model_validate(raw))
        except ValidationError as e:
            summary.skipped += 1
            summary.errors.append(
                f"{collection}[{position}]: {e.errors()[0]['loc']} {e.errors()[0]['msg']}"
            )
    return valid
