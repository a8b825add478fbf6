# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Persistent cache of observed exchange rates."""

import logging
import threading
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from pydantic import ValidationError

from fxcache.clock import Clock, current_millis
from fxcache.exceptions import CacheWriteError, StorageError
from fxcache.schemas.exchange_rate import CachedRate, CacheStats
from fxcache.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

# Namespace shared by every cache key in the underlying store
CACHE_KEY_PREFIX = "exchange_rate_"

# Cache duration before an entry counts as expired
CACHE_TTL = timedelta(hours=24)


class LookupStatus(str, Enum):
    """Outcome of reading a single cache entry."""

    FOUND = "found"
    MISSING = "missing"
    CORRUPT = "corrupt"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class CacheLookup:
    """Result of a cache read.

    ``rate`` is only set when ``status`` is FOUND. Corrupt and unreadable
    entries behave exactly like missing ones for callers that only look at
    ``rate``.
    """

    status: LookupStatus
    rate: CachedRate | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


def build_cache_key(from_currency: str, to_currency: str) -> str:
    """Build the storage key for a directional currency pair."""
    return f"{CACHE_KEY_PREFIX}{from_currency.upper()}_{to_currency.upper()}"


class RateCacheStore:
    """One cached rate per directional currency pair.

    Entries are never evicted. Once older than the TTL they are reported as
    expired but kept, so they can still serve as fallback data.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl: timedelta = CACHE_TTL,
        clock: Clock = current_millis,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Key-value medium holding the serialized rates.
            ttl: Freshness window for cached rates.
            clock: Source of the current time in epoch milliseconds.
        """
        self._store = store
        self._ttl_millis = int(ttl.total_seconds() * 1000)
        self._clock = clock
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    def now(self) -> int:
        """Current time in epoch milliseconds, as seen by this cache."""
        return self._clock()

    def is_valid(self, rate: CachedRate, now: int | None = None) -> bool:
        """Return True while ``rate`` is within the TTL."""
        if now is None:
            now = self._clock()
        return now - rate.cached_at <= self._ttl_millis

    def lookup(self, from_currency: str, to_currency: str) -> CacheLookup:
        """Read the entry for a pair and report how the read went."""
        key = build_cache_key(from_currency, to_currency)
        try:
            raw = self._store.get(key)
        except StorageError as e:
            logger.warning(f"Treating {key} as a cache miss, read failed: {e}")
            return CacheLookup(LookupStatus.UNREADABLE)

        if raw is None:
            return CacheLookup(LookupStatus.MISSING)

        rate = self._decode(key, raw)
        if rate is None:
            return CacheLookup(LookupStatus.CORRUPT)
        return CacheLookup(LookupStatus.FOUND, rate)

    def get(self, from_currency: str, to_currency: str) -> CachedRate | None:
        """Return the cached rate for a pair, or None if absent or corrupt."""
        return self.lookup(from_currency, to_currency).rate

    def put(self, from_currency: str, to_currency: str, rate: CachedRate) -> None:
        """Store ``rate`` for a pair, replacing any existing entry.

        The entry keeps the rate's own ``cached_at``.

        Raises:
            CacheWriteError: If the underlying store cannot persist the entry.
        """
        key = build_cache_key(from_currency, to_currency)
        payload = rate.to_json()
        with self._lock_for(key):
            try:
                self._store.put(key, payload)
            except StorageError as e:
                raise CacheWriteError(f"Failed to cache rate for {key}: {e}") from e
        logger.info(f"Cached {key} = {rate.conversion_rate}")

    def clear_all(self) -> int:
        """Remove every cache entry. Unrelated keys are left untouched."""
        removed = self._store.delete_prefix(CACHE_KEY_PREFIX)
        logger.info(f"Cleared {removed} cached exchange rate entries")
        return removed

    def stats(self) -> CacheStats:
        """Count entries by freshness at the current time.

        Entries that cannot be decoded are counted as expired.
        """
        now = self._clock()
        total = 0
        valid = 0
        for key, raw in self._store.items(CACHE_KEY_PREFIX):
            total += 1
            rate = self._decode(key, raw)
            if rate is not None and self.is_valid(rate, now):
                valid += 1
        return CacheStats(total=total, valid=valid, expired=total - valid)

    def _decode(self, key: str, raw: str) -> CachedRate | None:
        try:
            return CachedRate.from_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Ignoring corrupt cache entry {key}: {e.error_count()} errors"
            )
            return None

    def _lock_for(self, key: str) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock
