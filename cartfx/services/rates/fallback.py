from __future__ import annotations

"""Static last-resort rates.

Only consulted after live sources have failed or lack a pair. Values are
rough and deliberately never refreshed.
"""
from datetime import datetime
from typing import Dict, Mapping, Optional

from cartfx.models.constants import FALLBACK_RATES
from cartfx.models.rates import RateSnapshot


class FallbackRateTable:
    def __init__(self, table: Optional[Mapping[str, Mapping[str, float]]] = None):
        self._table: Dict[str, Dict[str, float]] = {
            base.upper(): {q.upper(): float(r) for q, r in row.items()}
            for base, row in (table if table is not None else FALLBACK_RATES).items()
        }

    def lookup(self, from_currency: str, to_currency: str) -> Optional[float]:
        row = self._table.get(from_currency.strip().upper())
        if row is None:
            return None
        return row.get(to_currency.strip().upper())

    def snapshot(self, base_currency: str, fetched_at: datetime) -> Optional[RateSnapshot]:
        """Rate table for base built from its fallback row, if it has one."""
        base_currency = base_currency.strip().upper()
        row = self._table.get(base_currency)
        if row is None:
            return None
        rates = dict(row)
        rates[base_currency] = 1.0
        return RateSnapshot(
            base_currency=base_currency,
            rates=rates,
            fetched_at=fetched_at,
            source="fallback",
        )

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.lookup(*pair) is not None
