"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from batch_timeline.domain.farm_config import FarmConfig
from batch_timeline.schemas.farm_config import load_farm_config_file, parse_farm_config


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./batch_timeline.db"
    db_echo: bool = False

    # Farm
    farm_config_file: str | None = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Application
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BATCH_TIMELINE_",
        case_sensitive=False,
    )


settings = Settings()


@lru_cache(maxsize=1)
def get_farm_config() -> FarmConfig:
    """
    Load the farm configuration once per process.

    Reads ``farm_config_file`` when set, otherwise uses the built-in
    defaults. Invalid configuration raises InvalidFarmConfigError here,
    before any timeline is computed.
    """
    if settings.farm_config_file:
        return load_farm_config_file(settings.farm_config_file)
    return parse_farm_config({})
