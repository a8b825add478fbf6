# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency conversion with a persistent, expiring exchange rate cache."""

from fxcache.bootstrap import build_conversion_service
from fxcache.schemas.exchange_rate import CachedRate, CacheStats, ExchangeRate
from fxcache.services.conversion_service import (
    ConversionResult,
    ConversionSource,
    CurrencyConversionService,
)

__version__ = "0.1.0"

__all__ = [
    "CacheStats",
    "CachedRate",
    "ConversionResult",
    "ConversionSource",
    "CurrencyConversionService",
    "ExchangeRate",
    "build_conversion_service",
]
