import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Mapping, Optional

import pytest

from cartfx.core.errors import AllEndpointsFailedError
from cartfx.models.rates import RateSnapshot
from cartfx.services.rates.base import RateProvider
from cartfx.services.rates.cache_service import RateCache
from cartfx.services.rates.conversion import ConversionEngine
from cartfx.services.rates.fallback import FallbackRateTable


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class StubProvider(RateProvider):
    """Serves fixed tables and records every base it was asked for."""

    def __init__(
        self,
        tables: Mapping[str, Mapping[str, float]],
        clock: FakeClock,
        fail: bool = False,
    ):
        self.tables: Dict[str, Dict[str, float]] = {k: dict(v) for k, v in tables.items()}
        self.clock = clock
        self.fail = fail
        self.calls: List[str] = []

    async def fetch_rate_table(self, base_currency: str) -> RateSnapshot:
        self.calls.append(base_currency)
        # yield like a real network call so gathered lookups interleave
        await asyncio.sleep(0)
        if self.fail or base_currency not in self.tables:
            raise AllEndpointsFailedError(base_currency, ["stub://a", "stub://b"])
        rates = dict(self.tables[base_currency])
        rates[base_currency] = 1.0
        return RateSnapshot(
            base_currency=base_currency,
            rates=rates,
            fetched_at=self.clock(),
            source="stub",
        )


# Exactly reciprocal so round trips are exact
RECIPROCAL_TABLES = {
    "USD": {"EUR": 0.5, "GBP": 0.25},
    "EUR": {"USD": 2.0, "GBP": 0.5},
    "GBP": {"USD": 4.0, "EUR": 2.0},
}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider(clock: FakeClock) -> StubProvider:
    return StubProvider(RECIPROCAL_TABLES, clock)


@pytest.fixture
def rate_cache(provider: StubProvider, clock: FakeClock) -> RateCache:
    return RateCache(provider, capacity=10, staleness=timedelta(minutes=5), now=clock)


@pytest.fixture
def engine(rate_cache: RateCache) -> ConversionEngine:
    return ConversionEngine(rate_cache, FallbackRateTable())


@pytest.fixture
def failing_engine(clock: FakeClock) -> ConversionEngine:
    cache = RateCache(StubProvider({}, clock, fail=True), now=clock)
    return ConversionEngine(cache, FallbackRateTable())
