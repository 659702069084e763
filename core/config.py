"""Configuration management for swellsync."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_USER_AGENT,
)
from .types import Environment

TRUE_VALUES = ("true", "1", "yes", "on")


class Settings(BaseModel):
    """Application settings."""

    # Environment
    version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # API Settings
    api_title: str = Field(default="swellsync API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")
    cors_allow_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Storage
    db_path: Path | None = Field(
        default=None,
        description="SQLite database path (defaults depend on environment)",
    )

    # Scheduler Settings
    sync_max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS, ge=1, description="Worker threads for fetch tasks"
    )
    refresh_interval_seconds: int = Field(
        default=DEFAULT_REFRESH_INTERVAL,
        ge=1,
        description="Interval between periodic refresh triggers in seconds",
    )
    periodic_refresh_enabled: bool = Field(
        default=True, description="Whether the periodic refresh trigger runs"
    )

    # HTTP Settings
    http_connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, description="HTTP connect timeout in seconds"
    )
    http_read_timeout: float = Field(
        default=DEFAULT_READ_TIMEOUT, description="HTTP read timeout in seconds"
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent sent to data sources"
    )

    # Data source endpoints
    ndbc_base_url: str = Field(
        default="https://www.ndbc.noaa.gov",
        description="NOAA National Data Buoy Center base URL",
    )
    coops_mdapi_base_url: str = Field(
        default="https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi",
        description="NOAA CO-OPS metadata API base URL",
    )
    coops_data_base_url: str = Field(
        default="https://api.tidesandcurrents.noaa.gov/api/prod/datagetter",
        description="NOAA CO-OPS data API URL",
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # The periodic trigger would hit real endpoints during tests
        if self.environment == Environment.TESTING:
            self.periodic_refresh_enabled = False

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in TRUE_VALUES


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    cors_origins_str = os.getenv("SWELLSYNC_CORS_ORIGINS", "*")
    if cors_origins_str == "*":
        cors_origins = ["*"]
    else:
        cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

    db_path_str = os.getenv("SWELLSYNC_DB_PATH")
    defaults = Settings()

    return Settings(
        environment=Environment(os.getenv("SWELLSYNC_ENV", "development")),
        api_title=os.getenv("SWELLSYNC_API_TITLE", defaults.api_title),
        api_version=os.getenv("SWELLSYNC_API_VERSION", defaults.api_version),
        cors_allow_origins=cors_origins,
        log_level=os.getenv("SWELLSYNC_LOG_LEVEL", "INFO").upper(),
        db_path=Path(db_path_str) if db_path_str else None,
        sync_max_workers=int(
            os.getenv("SWELLSYNC_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
        ),
        refresh_interval_seconds=int(
            os.getenv("SWELLSYNC_REFRESH_INTERVAL", str(DEFAULT_REFRESH_INTERVAL))
        ),
        periodic_refresh_enabled=_env_bool("SWELLSYNC_PERIODIC_REFRESH", "true"),
        http_connect_timeout=float(
            os.getenv("SWELLSYNC_CONNECT_TIMEOUT", str(DEFAULT_CONNECT_TIMEOUT))
        ),
        http_read_timeout=float(
            os.getenv("SWELLSYNC_READ_TIMEOUT", str(DEFAULT_READ_TIMEOUT))
        ),
        http_user_agent=os.getenv("SWELLSYNC_USER_AGENT", DEFAULT_USER_AGENT),
        ndbc_base_url=os.getenv("SWELLSYNC_NDBC_BASE_URL", defaults.ndbc_base_url),
        coops_mdapi_base_url=os.getenv(
            "SWELLSYNC_COOPS_MDAPI_BASE_URL", defaults.coops_mdapi_base_url
        ),
        coops_data_base_url=os.getenv(
            "SWELLSYNC_COOPS_DATA_BASE_URL", defaults.coops_data_base_url
        ),
    )
