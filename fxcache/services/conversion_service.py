# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency conversion with cache-first lookup and stale fallback."""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum

from fxcache.exceptions import (
    ConversionUnavailableError,
    InvalidCurrencyCodeError,
    RateProviderError,
)
from fxcache.schemas.exchange_rate import CachedRate, CacheStats
from fxcache.services.rate_cache import RateCacheStore
from fxcache.services.rate_provider import DEFAULT_TIMEOUT_SECONDS, RateProvider

logger = logging.getLogger(__name__)

# ISO 4217 codes plus the longer ticker-style codes some providers list
CURRENCY_CODE_PATTERN = re.compile(r"^[A-Za-z]{3,10}$")


class ConversionSource(str, Enum):
    """Where the rate behind a conversion came from."""

    IDENTITY = "identity"
    ZERO = "zero"
    CACHE = "cache"
    LIVE = "live"
    STALE = "stale"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ConversionResult:
    """Result of a currency conversion.

    A failed conversion has ``source`` UNAVAILABLE and ``converted_amount``
    None. It never carries a placeholder amount.
    """

    original_amount: float
    original_currency: str
    converted_amount: float | None
    target_currency: str
    exchange_rate: float | None
    source: ConversionSource

    @property
    def ok(self) -> bool:
        return self.converted_amount is not None

    def unwrap(self) -> float:
        """Return the converted amount.

        Raises:
            ConversionUnavailableError: If the conversion failed.
        """
        if self.converted_amount is None:
            raise ConversionUnavailableError(
                f"No exchange rate available for "
                f"{self.original_currency} to {self.target_currency}"
            )
        return self.converted_amount


def normalize_currency_code(code: str) -> str:
    """Strip and upper-case a currency code after checking its shape.

    Raises:
        InvalidCurrencyCodeError: If ``code`` is not 3 to 10 ASCII letters.
    """
    if not isinstance(code, str) or not CURRENCY_CODE_PATTERN.match(code.strip()):
        raise InvalidCurrencyCodeError(f"Invalid currency code: {code!r}")
    return code.strip().upper()


def _same_currency(from_currency: str, to_currency: str) -> bool:
    if not isinstance(from_currency, str) or not isinstance(to_currency, str):
        return False
    return from_currency.strip().upper() == to_currency.strip().upper()


class CurrencyConversionService:
    """Converts amounts between currencies.

    Lookup order for a pair: valid cache entry, live provider fetch, expired
    cache entry. Concurrent fetches for the same pair share one request.
    """

    def __init__(
        self,
        cache: RateCacheStore,
        provider: RateProvider,
        fetch_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the conversion service.

        Args:
            cache: Rate cache consulted before and after every fetch.
            provider: Source of live rates.
            fetch_timeout: Upper bound in seconds for a single provider fetch.
        """
        self.cache = cache
        self.provider = provider
        self.fetch_timeout = fetch_timeout
        self._inflight: dict[tuple[str, str], asyncio.Task[float | None]] = {}

    async def close(self) -> None:
        """Close the rate provider."""
        await self.provider.close()

    async def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
    ) -> ConversionResult:
        """Convert an amount from one currency to another.

        Args:
            amount: Amount to convert.
            from_currency: Source currency code, case-insensitive.
            to_currency: Target currency code, case-insensitive.

        Returns:
            ConversionResult. Check ``ok`` or call ``unwrap()``.

        Raises:
            InvalidCurrencyCodeError: If a currency code is malformed.
            CacheWriteError: If a freshly fetched rate could not be cached.
        """
        # Identical codes convert 1:1 whether or not they are well formed
        if _same_currency(from_currency, to_currency):
            code = from_currency.strip().upper()
            return ConversionResult(
                original_amount=amount,
                original_currency=code,
                converted_amount=amount,
                target_currency=code,
                exchange_rate=1.0,
                source=ConversionSource.IDENTITY,
            )

        from_code = normalize_currency_code(from_currency)
        to_code = normalize_currency_code(to_currency)

        def result(rate: float | None, source: ConversionSource) -> ConversionResult:
            return ConversionResult(
                original_amount=amount,
                original_currency=from_code,
                converted_amount=amount * rate if rate is not None else None,
                target_currency=to_code,
                exchange_rate=rate,
                source=source,
            )

        if amount == 0:
            return ConversionResult(
                original_amount=amount,
                original_currency=from_code,
                converted_amount=0.0,
                target_currency=to_code,
                exchange_rate=None,
                source=ConversionSource.ZERO,
            )

        cached = self.cache.get(from_code, to_code)
        if cached is not None and self.cache.is_valid(cached):
            logger.debug(f"Cache hit for {from_code}->{to_code}")
            return result(cached.conversion_rate, ConversionSource.CACHE)

        live_rate = await self._fetch_rate(from_code, to_code)
        if live_rate is not None:
            return result(live_rate, ConversionSource.LIVE)

        if cached is not None:
            logger.warning(
                f"Using expired rate for {from_code}->{to_code} "
                f"cached at {cached.cached_at}"
            )
            return result(cached.conversion_rate, ConversionSource.STALE)

        logger.warning(f"No exchange rate available for {from_code}->{to_code}")
        return result(None, ConversionSource.UNAVAILABLE)

    async def is_available(self, from_currency: str, to_currency: str) -> bool:
        """Check whether a conversion for this pair is expected to succeed.

        Without a valid cache entry this performs a live fetch, which caches
        the fetched rate just like ``convert`` would.
        """
        if _same_currency(from_currency, to_currency):
            return True
        from_code = normalize_currency_code(from_currency)
        to_code = normalize_currency_code(to_currency)

        cached = self.cache.get(from_code, to_code)
        if cached is not None and self.cache.is_valid(cached):
            return True

        return await self._fetch_rate(from_code, to_code) is not None

    def clear_cache(self) -> int:
        """Remove all cached rates. Returns the number of entries removed."""
        return self.cache.clear_all()

    def cache_stats(self) -> CacheStats:
        """Count cached rates by freshness."""
        return self.cache.stats()

    async def _fetch_rate(self, from_code: str, to_code: str) -> float | None:
        """Fetch and cache a live rate, sharing in-flight fetches per pair."""
        pair = (from_code, to_code)
        task = self._inflight.get(pair)
        if task is None or task.done():
            task = asyncio.ensure_future(self._fetch_and_cache(from_code, to_code))
            self._inflight[pair] = task
            task.add_done_callback(lambda done: self._forget(pair, done))
        else:
            logger.debug(f"Joining in-flight fetch for {from_code}->{to_code}")
        # Shielded so a cancelled caller does not cancel the shared fetch
        return await asyncio.shield(task)

    def _forget(self, pair: tuple[str, str], task: asyncio.Task) -> None:
        if self._inflight.get(pair) is task:
            del self._inflight[pair]
        # Mark the outcome as retrieved even when every caller was cancelled
        if not task.cancelled():
            task.exception()

    async def _fetch_and_cache(self, from_code: str, to_code: str) -> float | None:
        try:
            exchange_rate = await asyncio.wait_for(
                self.provider.fetch_rate(from_code, to_code),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Timed out after {self.fetch_timeout}s fetching {from_code}->{to_code}"
            )
            return None
        except RateProviderError as e:
            logger.error(f"Failed to fetch rate {from_code}->{to_code}: {e}")
            return None

        self.cache.put(
            from_code,
            to_code,
            CachedRate(
                base_code=from_code,
                target_code=to_code,
                conversion_rate=exchange_rate.conversion_rate,
                cached_at=self.cache.now(),
            ),
        )
        return exchange_rate.conversion_rate
