"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from batch_timeline.api.v1.router import router as api_v1_router
from batch_timeline.config import get_farm_config, settings
from batch_timeline.database import init_db
from batch_timeline.logging_config import configure_logging
from batch_timeline.middleware import RequestContextMiddleware


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Load the farm configuration, set up logging and create tables on startup."""
    # Rejects a malformed configuration before the first request is served
    farm_config = get_farm_config()
    configure_logging(log_level=settings.log_level, farm_id=farm_config.farm_id)
    init_db()
    yield


app = FastAPI(
    title="Batch Timeline API",
    description="Production batch stage, housing and inventory timeline",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(api_v1_router)


@app.get("/health", tags=["health"])
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
