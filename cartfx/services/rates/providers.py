from __future__ import annotations

"""Concrete rate providers and factory.

'external-http' walks an ordered list of public FX endpoints and returns the
first table it can get. 'static' serves built-in mock tables for offline
development and demos.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

import httpx

from cartfx.core.config import Settings
from cartfx.core.errors import AllEndpointsFailedError, EndpointFailure, InvalidArgument
from cartfx.models.constants import MOCK_RATES
from cartfx.models.rates import RateSnapshot, normalize_currency
from cartfx.services.http_client import get_json
from .base import RateProvider

logger = logging.getLogger("cartfx.rates")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_usable_rate(value: Any) -> bool:
    """Finite and positive. json accepts NaN/Infinity literals, so check explicitly."""
    # bool is an int subclass; a True rate is junk, not 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def parse_rates(url: str, payload: Mapping[str, Any], base_currency: str) -> Dict[str, float]:
    """Pull the numeric rate mapping out of a provider body and pin the self-rate."""
    raw = payload.get("rates")
    if not isinstance(raw, dict):
        raise EndpointFailure(url, "body has no 'rates' object")
    rates: Dict[str, float] = {}
    dropped = 0
    for code, value in raw.items():
        code = str(code).upper()
        if code == base_currency:
            continue
        if is_usable_rate(value):
            rates[code] = float(value)
        else:
            dropped += 1
    if dropped and not rates:
        raise EndpointFailure(url, f"no usable rates in body ({dropped} rejected)")
    rates[base_currency] = 1.0
    return rates


class StaticRateProvider(RateProvider):
    def __init__(
        self,
        tables: Optional[Mapping[str, Mapping[str, float]]] = None,
        now: Clock = utcnow,
    ):
        self._tables = tables if tables is not None else MOCK_RATES
        self._now = now

    async def fetch_rate_table(self, base_currency: str) -> RateSnapshot:
        base = normalize_currency(base_currency)
        table = self._tables.get(base)
        if table is None:
            raise AllEndpointsFailedError(base, ["static"])
        rates = {k: float(v) for k, v in table.items()}
        rates[base] = 1.0
        return RateSnapshot(
            base_currency=base, rates=rates, fetched_at=self._now(), source="static"
        )


class HttpRateProvider(RateProvider):
    """Sequential failover across endpoint templates.

    Templates carry a '{base}' placeholder. Endpoints are tried strictly in
    order, one request in flight at a time; the first usable body wins and the
    rest are never contacted.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoints: Sequence[str],
        *,
        timeout: float = 5.0,
        retries: int = 0,
        backoff: float = 0.5,
        now: Clock = utcnow,
    ):
        if not endpoints:
            raise InvalidArgument("HttpRateProvider needs at least one endpoint")
        self._client = client
        self._endpoints: List[str] = list(endpoints)
        self._timeout = timeout
        self._retries = retries
        self._backoff = backoff
        self._now = now

    @property
    def endpoints(self) -> List[str]:
        return list(self._endpoints)

    async def fetch_rate_table(self, base_currency: str) -> RateSnapshot:
        base = normalize_currency(base_currency)
        attempted: List[str] = []
        for template in self._endpoints:
            url = template.format(base=quote(base))
            attempted.append(url)
            try:
                payload = await get_json(
                    self._client,
                    url,
                    timeout=self._timeout,
                    retries=self._retries,
                    backoff=self._backoff,
                )
                rates = parse_rates(url, payload, base)
            except EndpointFailure as e:
                logger.warning(
                    "rate endpoint failed",
                    extra={"base": base, "url": url, "reason": e.reason},
                )
                continue
            logger.info(
                "fetched rate table",
                extra={"base": base, "url": url, "currencies": len(rates)},
            )
            return RateSnapshot(
                base_currency=base, rates=rates, fetched_at=self._now(), source=url
            )
        logger.error(
            "all rate endpoints failed", extra={"base": base, "endpoints": attempted}
        )
        raise AllEndpointsFailedError(base, attempted)


def make_rate_provider(
    kind: str,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    now: Clock = utcnow,
) -> RateProvider:
    if kind == "static":
        return StaticRateProvider(now=now)
    if kind == "external-http":
        if client is None:
            raise InvalidArgument("external-http provider needs an httpx.AsyncClient")
        return HttpRateProvider(
            client,
            settings.rate_endpoints,
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
            backoff=settings.http_backoff_seconds,
            now=now,
        )
    raise ValueError(f"Unknown rate provider kind '{kind}'")
