# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exception hierarchy for the conversion engine and its collaborators."""


class FxCacheError(Exception):
    """Base exception for all fxcache errors."""


class StorageError(FxCacheError):
    """The key-value medium failed to read or write."""


class CacheWriteError(FxCacheError):
    """A fetched rate could not be persisted to the rate cache."""


class RateProviderError(FxCacheError):
    """The remote rate provider could not deliver a usable rate."""


class ConversionUnavailableError(FxCacheError):
    """Neither live nor cached data exists for a currency pair."""


class InvalidCurrencyCodeError(FxCacheError, ValueError):
    """A currency code is not 3 to 10 ASCII letters."""
