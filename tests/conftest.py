# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import asyncio
from datetime import datetime, timezone

import pytest

from fxcache.clock import MILLIS_PER_HOUR
from fxcache.database import create_db_engine, create_session_factory, init_db
from fxcache.exceptions import RateProviderError
from fxcache.schemas.exchange_rate import ExchangeRate
from fxcache.services.conversion_service import CurrencyConversionService
from fxcache.services.rate_cache import RateCacheStore
from fxcache.services.rate_provider import RateProvider
from fxcache.storage.memory import InMemoryKeyValueStore
from fxcache.storage.sql import SqlKeyValueStore

# 2025-01-15T00:00:00Z
START_MILLIS = 1_736_899_200_000


class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, now: int = START_MILLIS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, hours: float = 0, millis: int = 0) -> None:
        self.now += int(hours * MILLIS_PER_HOUR) + millis


class FakeRateProvider(RateProvider):
    """In-memory provider that records every fetch."""

    def __init__(self) -> None:
        self.rates: dict[tuple[str, str], float] = {}
        self.fail = False
        self.delay = 0.0
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def fetch_rate(self, base_code: str, target_code: str) -> ExchangeRate:
        self.calls.append((base_code, target_code))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail or (base_code, target_code) not in self.rates:
            raise RateProviderError(f"No rate for {base_code}->{target_code}")
        return ExchangeRate(
            base_code=base_code,
            target_code=target_code,
            conversion_rate=self.rates[(base_code, target_code)],
            observed_at=datetime.now(timezone.utc),
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider() -> FakeRateProvider:
    return FakeRateProvider()


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite database for each test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture(params=["memory", "sql"])
def kv_store(request, session_factory):
    """Run a test against every key-value backend."""
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return SqlKeyValueStore(session_factory)


@pytest.fixture
def rate_cache(clock) -> RateCacheStore:
    return RateCacheStore(InMemoryKeyValueStore(), clock=clock)


@pytest.fixture
def conversion_service(rate_cache, provider) -> CurrencyConversionService:
    """Create a conversion service with an in-memory cache and fake provider."""
    return CurrencyConversionService(rate_cache, provider, fetch_timeout=1.0)
