"""Database connection and session management."""

from typing import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from batch_timeline.config import settings

# Import models so their tables are registered on SQLModel.metadata
from batch_timeline.domain import models  # noqa: F401


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections are shared across request threads."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.database_url, echo=settings.db_echo)


def init_db(target: Engine | None = None) -> None:
    """Create any missing record tables."""
    SQLModel.metadata.create_all(target or engine)


def get_session() -> Generator[Session, None, None]:
    """Dependency to provide database session to endpoints."""
    with Session(engine) as session:
        yield session
