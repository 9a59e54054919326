"""
Central configuration using Pydantic BaseSettings.

All values come from ``ENM_*`` environment variables and are validated once at
startup. Invalid values surface as StartupError so the entry point can refuse
to start without the core exiting the process itself.

Usage:
    from nodemanager.config import get_settings

    settings = get_settings()
    print(settings.pause_delay)

Tests can reset the cached instance via get_settings.cache_clear().
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nodemanager.models.errors import StartupError

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Settings(BaseSettings):
    """Node manager configuration."""

    model_config = SettingsConfigDict(env_prefix="ENM_", extra="ignore")

    log_level: str = "info"
    log_file: str = "./logs/nodemanager.log"

    # Seconds between target status checks while paused
    pause_delay: float = Field(default=10.0, gt=0)
    # Seconds between scheduler cycles
    loop_delay: float = Field(default=10.0, gt=0)

    lock_file_location: Path = Path("/tmp/resin/resin-updates.lock")
    bluetooth_interface: str = "hci0"

    api_host: str = "0.0.0.0"
    api_port: int = Field(default=1337, gt=0, lt=65536)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept the level names understood by setup_logger."""
        level = v.strip().lower()
        if level == "warn":
            level = "warning"
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process.

    Raises:
        StartupError: If any ENM_* variable fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        raise StartupError(f"invalid configuration: {e}") from e


def get_pause_delay() -> float:
    """Pause delay in seconds."""
    return get_settings().pause_delay


def get_lock_file_location() -> Path:
    return get_settings().lock_file_location


def get_log_level() -> int:
    """Log level as a ``logging`` constant."""
    return LOG_LEVELS[get_settings().log_level]
