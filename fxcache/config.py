# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Every field can be overridden with an ``FXCACHE_``-prefixed environment
    variable, e.g. ``FXCACHE_DATABASE_URL``, or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FXCACHE_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = "sqlite:///./fxcache.db"
    provider_base_url: str = "https://v6.exchangerate-api.com"
    provider_api_key: str | None = None
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    cache_ttl_hours: int = Field(default=24, gt=0)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
