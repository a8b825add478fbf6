# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Wiring of a ready-to-use conversion service."""

import logging
from datetime import timedelta

from fxcache.config import Settings, get_settings
from fxcache.database import create_db_engine, create_session_factory, init_db
from fxcache.logging_config import configure_logging
from fxcache.services.conversion_service import CurrencyConversionService
from fxcache.services.rate_cache import RateCacheStore
from fxcache.services.rate_provider import HttpRateProvider
from fxcache.storage.sql import SqlKeyValueStore

logger = logging.getLogger(__name__)


def build_conversion_service(
    settings: Settings | None = None,
) -> CurrencyConversionService:
    """Create a conversion service backed by the configured database.

    Args:
        settings: Settings to use. Defaults to the environment settings.

    Returns:
        A service with an SQL-backed rate cache and an HTTP rate provider.
        Call ``close()`` on it when done.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)
    init_db(engine)
    cache = RateCacheStore(
        SqlKeyValueStore(create_session_factory(engine)),
        ttl=timedelta(hours=settings.cache_ttl_hours),
    )
    provider = HttpRateProvider(
        base_url=settings.provider_base_url,
        api_key=settings.provider_api_key,
        timeout=settings.fetch_timeout_seconds,
    )

    logger.info(
        f"Currency conversion ready (provider={settings.provider_base_url}, "
        f"ttl={settings.cache_ttl_hours}h)"
    )
    return CurrencyConversionService(
        cache,
        provider,
        fetch_timeout=settings.fetch_timeout_seconds,
    )
