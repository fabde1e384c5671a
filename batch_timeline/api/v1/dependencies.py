"""Shared FastAPI dependencies for the v1 routers."""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from batch_timeline.config import get_farm_config
from batch_timeline.database import get_session
from batch_timeline.domain.farm_config import FarmConfig
from batch_timeline.domain.services.record_service import RecordService


def get_record_service(
    session: Annotated[Session, Depends(get_session)],
    farm_config: Annotated[FarmConfig, Depends(get_farm_config)],
) -> RecordService:
    """Build a RecordService bound to the request's session."""
    return RecordService(session, farm_config)


RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
FarmConfigDep = Annotated[FarmConfig, Depends(get_farm_config)]
