"""Pytest fixtures for testing."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from batch_timeline.config import get_farm_config
from batch_timeline.database import get_session
from batch_timeline.domain.farm_config import FarmConfig
from batch_timeline.main import app
from batch_timeline.schemas.farm_config import parse_farm_config


@pytest.fixture(name="farm_config")
def farm_config_fixture() -> FarmConfig:
    """Built-in farm configuration (anchor 2025-G11 on 2025-05-24, 21-day interval)."""
    return parse_farm_config({})


@pytest.fixture(name="session")
def session_fixture():
    """Create a fresh in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session, farm_config: FarmConfig):
    """Create test client with overridden database session and farm configuration."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_farm_config] = lambda: farm_config
    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()
