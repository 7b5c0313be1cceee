from __future__ import annotations

"""Rate provider abstraction.

A provider returns the whole rate table for a base currency in one call.
Caching and fallback live above it (RateCache, ConversionEngine).
"""
from abc import ABC, abstractmethod
from typing import Mapping, Protocol

from cartfx.models.rates import RateSnapshot


class RateProvider(ABC):
    @abstractmethod
    async def fetch_rate_table(self, base_currency: str) -> RateSnapshot:
        """Return a fresh snapshot or raise AllEndpointsFailedError."""
        raise NotImplementedError


class SupportsRateTables(Protocol):
    async def get_rates(self, base_currency: str) -> Mapping[str, float]: ...
