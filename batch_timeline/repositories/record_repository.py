"""Data access layer for base records, daily records and housing overrides."""

import logging
from datetime import date, datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from sqlmodel import Session, select

from batch_timeline.domain.exceptions import RecordNotFoundError
from batch_timeline.domain.models import BaseRecord, DailyRecord, HousingOverride

logger = logging.getLogger(__name__)


class RecordRepository:
    """Repository for the three record collections that feed the timeline."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------ #
    # Base records                                                         #
    # ------------------------------------------------------------------ #

    def list_base_records(self) -> List[BaseRecord]:
        statement = select(BaseRecord).order_by(BaseRecord.batch_id)
        return list(self.session.exec(statement).all())

    def find_base_record(self, batch_id: str) -> Optional[BaseRecord]:
        statement = select(BaseRecord).where(BaseRecord.batch_id == batch_id)
        return self.session.exec(statement).first()

    def get_base_record(self, batch_id: str) -> BaseRecord:
        """
        Retrieve a base record by batch id.

        Raises:
            RecordNotFoundError: If no base record exists for the batch
        """
        record = self.find_base_record(batch_id)
        if not record:
            raise RecordNotFoundError(kind="Base record", key=batch_id)
        return record

    def upsert_base_record(self, batch_id: str, fields: Mapping[str, Any]) -> Tuple[BaseRecord, bool]:
        """
        Create or replace the base record for a batch.

        Args:
            batch_id: Batch identifier (the upsert key)
            fields: Column values; columns not given are cleared

        Returns:
            (record, created) where created is False when an existing row was updated
        """
        record = self.find_base_record(batch_id)
        created = record is None
        if record is None:
            record = BaseRecord(batch_id=batch_id)

        for column in _base_record_columns():
            setattr(record, column, fields.get(column))
        record.updated_at = datetime.now(timezone.utc)

        self._save(record)
        return record, created

    # ------------------------------------------------------------------ #
    # Daily records                                                        #
    # ------------------------------------------------------------------ #

    def list_daily_records(self, batch_id: Optional[str] = None) -> List[DailyRecord]:
        statement = select(DailyRecord)
        if batch_id is not None:
            statement = statement.where(DailyRecord.batch_id == batch_id)
        statement = statement.order_by(DailyRecord.record_date, DailyRecord.batch_id)
        return list(self.session.exec(statement).all())

    def find_daily_record(self, batch_id: str, record_date: date) -> Optional[DailyRecord]:
        statement = select(DailyRecord).where(
            DailyRecord.batch_id == batch_id,
            DailyRecord.record_date == record_date,
        )
        return self.session.exec(statement).first()

    def upsert_daily_record(
        self,
        batch_id: str,
        record_date: date,
        fields: Mapping[str, Any],
    ) -> Tuple[DailyRecord, bool]:
        """
        Merge event fields into the record for (batch_id, record_date).

        A field given again replaces the stored value; fields not given keep
        their stored value.

        Returns:
            (record, created)
        """
        record = self.find_daily_record(batch_id, record_date)
        created = record is None
        if record is None:
            record = DailyRecord(batch_id=batch_id, record_date=record_date)

        for column, value in fields.items():
            setattr(record, column, value)
        record.updated_at = datetime.now(timezone.utc)

        self._save(record)
        return record, created

    def delete_daily_record(self, batch_id: str, record_date: date) -> None:
        """
        Raises:
            RecordNotFoundError: If there is no record for the key
        """
        record = self.find_daily_record(batch_id, record_date)
        if not record:
            raise RecordNotFoundError(kind="Daily record", key=f"{batch_id}@{record_date}")
        self.session.delete(record)
        self.session.commit()

    # ------------------------------------------------------------------ #
    # Housing overrides                                                    #
    # ------------------------------------------------------------------ #

    def list_overrides(self, stage: Optional[str] = None) -> List[HousingOverride]:
        statement = select(HousingOverride)
        if stage is not None:
            statement = statement.where(HousingOverride.stage == stage)
        statement = statement.order_by(HousingOverride.batch_id, HousingOverride.stage)
        return list(self.session.exec(statement).all())

    def find_override(self, batch_id: str, stage: str) -> Optional[HousingOverride]:
        statement = select(HousingOverride).where(
            HousingOverride.batch_id == batch_id,
            HousingOverride.stage == stage,
        )
        return self.session.exec(statement).first()

    def upsert_override(
        self,
        batch_id: str,
        stage: str,
        assigned_unit: str,
        affects_following: bool,
    ) -> Tuple[HousingOverride, bool]:
        """Create or replace the override for (batch_id, stage)."""
        override = self.find_override(batch_id, stage)
        created = override is None
        if override is None:
            override = HousingOverride(batch_id=batch_id, stage=stage, assigned_unit=assigned_unit)

        override.assigned_unit = assigned_unit
        override.affects_following = affects_following
        override.updated_at = datetime.now(timezone.utc)

        self._save(override)
        return override, created

    def delete_override(self, batch_id: str, stage: str) -> None:
        """
        Raises:
            RecordNotFoundError: If there is no override for the key
        """
        override = self.find_override(batch_id, stage)
        if not override:
            raise RecordNotFoundError(kind="Override", key=f"{batch_id}/{stage}")
        self.session.delete(override)
        self.session.commit()

    # ------------------------------------------------------------------ #
    # Wholesale replacement                                                #
    # ------------------------------------------------------------------ #

    def replace_all(
        self,
        bases: Optional[Sequence[BaseRecord]] = None,
        records: Optional[Sequence[DailyRecord]] = None,
        overrides: Optional[Sequence[HousingOverride]] = None,
    ) -> int:
        """
        Swap out whole collections in a single transaction.

        A collection passed as None is left as it is. Either every supplied
        collection is replaced or, on failure, none is.

        Returns:
            Number of rows written
        """
        written = 0
        try:
            for model, rows in (
                (BaseRecord, bases),
                (DailyRecord, records),
                (HousingOverride, overrides),
            ):
                if rows is None:
                    continue
                for existing in self.session.exec(select(model)).all():
                    self.session.delete(existing)
                # Deletes must reach the database before inserts reuse their keys
                self.session.flush()
                self.session.add_all(rows)
                written += len(rows)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Wholesale replacement failed; rolled back")
            raise
        return written

    def _save(self, row: Union[BaseRecord, DailyRecord, HousingOverride]) -> None:
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except Exception:
            self.session.rollback()
            raise


def _base_record_columns() -> List[str]:
    excluded = {"id", "batch_id", "created_at", "updated_at"}
    return [name for name in BaseRecord.model_fields if name not in excluded]
