# backend/beautibook/core/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import (
    BRAND_NAME,
    DEFAULT_BUSINESS_TIMEZONE,
    DEFAULT_HOLD_TTL_MINUTES,
    DEFAULT_SLOT_INTERVAL_MINUTES,
)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime configuration for the booking core."""

    brand_name: str = BRAND_NAME
    environment: str = Field(default="local", description="Deployment environment name")
    is_testing: bool = Field(default=False, alias="is_testing")

    # Database
    database_url: str = Field(
        default="sqlite:///./beautibook.db",
        description="SQLAlchemy database URL (PostgreSQL in production)",
    )
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    database_pool_timeout: int = Field(default=30, ge=1)

    # Business calendar
    business_timezone: str = Field(
        default=DEFAULT_BUSINESS_TIMEZONE,
        description="Single timezone in which working hours and slot displays are expressed",
    )
    slot_interval_minutes: int = Field(default=DEFAULT_SLOT_INTERVAL_MINUTES, ge=1, le=120)

    # Holds
    hold_ttl_minutes: int = Field(default=DEFAULT_HOLD_TTL_MINUTES, ge=1, le=60)
    hold_cleanup_interval_minutes: int = Field(default=1, ge=1)

    # Celery / Redis
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Observability
    log_level: str = Field(default="INFO")
    slow_operation_threshold_ms: int = Field(default=1000, ge=1)
    prometheus_enabled: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("business_timezone")
    @classmethod
    def validate_business_timezone(cls, v: str) -> str:
        """Reject timezone names pytz does not know."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
