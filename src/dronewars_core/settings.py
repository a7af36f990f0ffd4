"""Package-wide configuration loaded from the environment."""

from __future__ import annotations

import logging
from functools import cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Centralized settings for the Drone Wars rules core."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DRONEWARS_",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    mia_detection_threshold: int = Field(default=100, ge=1)
    default_encounter_chance: float = Field(default=15, ge=0, le=100)
    rng_seed: int = 0


@cache
def get_settings() -> CoreSettings:
    """Return the cached settings instance."""

    return CoreSettings()


def configure_logging(settings: CoreSettings | None = None) -> None:
    """Apply the configured log level and format to the root logger."""
    active = settings or get_settings()
    logging.basicConfig(level=active.log_level.upper(), format=active.log_format)


__all__ = ["CoreSettings", "configure_logging", "get_settings"]
