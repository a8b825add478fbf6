# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pydantic schemas package."""

from fxcache.schemas.exchange_rate import (
    CachedRate,
    CacheStats,
    ExchangeRate,
    ProviderPayload,
)

__all__ = [
    "CacheStats",
    "CachedRate",
    "ExchangeRate",
    "ProviderPayload",
]
