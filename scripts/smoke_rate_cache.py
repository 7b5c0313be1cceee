"""Smoke script for the rate cache.

Demonstrates:
 1. First access triggers a provider fetch.
 2. Second access within the staleness window is a cache hit (same fetched_at).
 3. Moving the clock past the window forces exactly one refetch.

Uses the static provider and a hand-cranked clock, so no network is needed.
NOTE: This is a lightweight diagnostic and not a formal test.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from pprint import pprint

from cartfx.services.rates.cache_service import RateCache
from cartfx.services.rates.providers import StaticRateProvider


async def run():
    clock = {"now": datetime(2025, 1, 1, tzinfo=timezone.utc)}

    def now():
        return clock["now"]

    cache = RateCache(StaticRateProvider(now=now), staleness=timedelta(minutes=5), now=now)
    out = {}

    snap = await cache.snapshot("USD")
    out["initial"] = {"fetched_at": snap.fetched_at.isoformat(), "EUR": snap.rates["EUR"]}

    clock["now"] += timedelta(minutes=1)
    snap = await cache.snapshot("USD")
    out["second"] = {"fetched_at": snap.fetched_at.isoformat(), "EUR": snap.rates["EUR"]}

    clock["now"] += timedelta(minutes=5)
    snap = await cache.snapshot("USD")
    out["after_expiry"] = {"fetched_at": snap.fetched_at.isoformat(), "EUR": snap.rates["EUR"]}

    out["stats"] = cache.stats().as_dict()
    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
