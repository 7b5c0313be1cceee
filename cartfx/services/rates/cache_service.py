from __future__ import annotations

"""Rate table cache keyed by base currency.

Purpose:
    Keep network traffic to the FX providers bounded. One snapshot per base
    currency lives in an LRU (capacity settings.rates_cache_capacity); a
    snapshot is trusted for settings.rates_staleness_seconds after it was
    fetched.

Design:
    - A fresh hit is served straight from memory, no provider call.
    - Absent or stale -> ask the provider, store the new snapshot, return it.
    - Stale entries are never served. If the provider raises
      AllEndpointsFailedError it propagates; deciding what to do without live
      data is ConversionEngine's business.
    - Two concurrent misses for one base may both fetch. Whichever finishes
      last overwrites the other; snapshots for one key within one window are
      interchangeable.
    - Staleness is checked lazily on read, there is no background refresh.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, Mapping, Union

from cartfx.core.errors import AllEndpointsFailedError
from cartfx.models.rates import RateSnapshot, normalize_currency
from cartfx.structures.lru import LRUCache
from .base import RateProvider
from .providers import Clock, utcnow

logger = logging.getLogger("cartfx.rates")

DEFAULT_CAPACITY = 100
DEFAULT_STALENESS = timedelta(minutes=5)


@dataclass
class CacheStats:
    hits: int
    misses: int
    fetches: int
    failures: int
    size: int
    capacity: int

    @property
    def hit_ratio(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def as_dict(self) -> Dict[str, Union[int, float]]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "fetches": self.fetches,
            "failures": self.failures,
            "size": self.size,
            "capacity": self.capacity,
            "hit_ratio": self.hit_ratio,
        }


class RateCache:
    def __init__(
        self,
        provider: RateProvider,
        *,
        capacity: int = DEFAULT_CAPACITY,
        staleness: timedelta = DEFAULT_STALENESS,
        now: Clock = utcnow,
    ):
        self._provider = provider
        self._store: LRUCache[str, RateSnapshot] = LRUCache(capacity)
        self._staleness = staleness
        self._now = now
        self._hits = 0
        self._misses = 0
        self._fetches = 0
        self._failures = 0

    @property
    def staleness(self) -> timedelta:
        return self._staleness

    def now(self) -> datetime:
        return self._now()

    # Internal --------------------------------------------------
    def _is_fresh(self, snap: RateSnapshot) -> bool:
        return self._now() - snap.fetched_at < self._staleness

    async def _refresh(self, base: str) -> RateSnapshot:
        self._fetches += 1
        try:
            snap = await self._provider.fetch_rate_table(base)
        except AllEndpointsFailedError:
            self._failures += 1
            raise
        self._store.put(base, snap)
        return snap

    # Public API -----------------------------------------------
    async def snapshot(self, base_currency: str) -> RateSnapshot:
        base = normalize_currency(base_currency)
        snap = self._store.get(base)
        if snap is not None and self._is_fresh(snap):
            self._hits += 1
            return snap
        self._misses += 1
        if snap is not None:
            logger.debug("stale rate table", extra={"base": base})
        return await self._refresh(base)

    async def get_rates(self, base_currency: str) -> Mapping[str, float]:
        """Rates relative to base_currency. Treat the mapping as read-only."""
        return (await self.snapshot(base_currency)).rates

    async def preload(self, bases: Iterable[str]) -> Dict[str, bool]:
        """Warm the cache one base at a time; failures are reported, not raised."""
        out: Dict[str, bool] = {}
        for base in bases:
            try:
                await self.snapshot(base)
                out[base] = True
            except AllEndpointsFailedError:
                logger.warning("preload failed", extra={"base": base})
                out[base] = False
        return out

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            fetches=self._fetches,
            failures=self._failures,
            size=self._store.size(),
            capacity=self._store.capacity,
        )

    def clear(self) -> None:
        self._store.clear()
