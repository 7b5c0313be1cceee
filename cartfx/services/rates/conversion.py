from __future__ import annotations

"""Currency conversion engine.

Preference order for every conversion: same currency (no lookup), live or
cached rate, static fallback rate, and finally the amount unchanged. Remote
unavailability never surfaces as an exception; the last two outcomes are
flagged as degraded and logged so the UI can show a notice.

No rounding happens here. Formatting to a currency's minor unit is the
presentation layer's job.
"""
import asyncio
import logging
from datetime import timedelta
from typing import Optional, Sequence

import httpx

from cartfx.core.config import Settings
from cartfx.core.errors import AllEndpointsFailedError, InvalidArgument
from cartfx.models.cart import ConversionResult, ConvertedLineItem, LineItem
from cartfx.models.rates import AmountConversion, normalize_currency
from .base import SupportsRateTables
from .cache_service import RateCache
from .fallback import FallbackRateTable
from .providers import Clock, is_usable_rate, make_rate_provider, utcnow

logger = logging.getLogger("cartfx.conversion")


class ConversionEngine:
    def __init__(self, rate_cache: SupportsRateTables, fallback: FallbackRateTable):
        self.rate_cache = rate_cache
        self.fallback = fallback
        self.degraded_count = 0

    async def quote(
        self, amount: float, from_currency: str, to_currency: str
    ) -> AmountConversion:
        src = normalize_currency(from_currency)
        dst = normalize_currency(to_currency)
        if src == dst:
            return AmountConversion(
                amount=amount,
                from_currency=src,
                to_currency=dst,
                converted=amount,
                rate=1.0,
                source="identity",
            )

        rate: Optional[float] = None
        try:
            rates = await self.rate_cache.get_rates(src)
            rate = rates.get(dst)
            if not is_usable_rate(rate):
                rate = None
                logger.warning(
                    "missing live rate, using fallback",
                    extra={"from_currency": src, "to_currency": dst},
                )
        except AllEndpointsFailedError as e:
            logger.warning(
                "live rates unavailable, using fallback",
                extra={"from_currency": src, "to_currency": dst, "reason": str(e)},
            )
        if rate is not None:
            return AmountConversion(
                amount=amount,
                from_currency=src,
                to_currency=dst,
                converted=amount * rate,
                rate=rate,
                source="live",
            )

        self.degraded_count += 1
        fb = self.fallback.lookup(src, dst)
        if fb is not None:
            logger.info(
                "using fallback rate",
                extra={"from_currency": src, "to_currency": dst, "rate": fb},
            )
            return AmountConversion(
                amount=amount,
                from_currency=src,
                to_currency=dst,
                converted=amount * fb,
                rate=fb,
                source="fallback",
            )

        logger.warning(
            "no rate available, returning amount unconverted",
            extra={"from_currency": src, "to_currency": dst},
        )
        return AmountConversion(
            amount=amount,
            from_currency=src,
            to_currency=dst,
            converted=amount,
            rate=1.0,
            source="unconverted",
        )

    async def convert_amount(
        self, amount: float, from_currency: str, to_currency: str
    ) -> float:
        return (await self.quote(amount, from_currency, to_currency)).converted

    async def convert_line_items(
        self, items: Sequence[LineItem], to_currency: str, tax_rate: float = 0.0
    ) -> ConversionResult:
        dst = normalize_currency(to_currency)
        if tax_rate < 0:
            raise InvalidArgument("tax_rate must not be negative")
        # one lookup per item, awaited together; the cache tolerates duplicate misses
        quotes = await asyncio.gather(
            *(self.quote(it.unit_price_base, it.currency_base, dst) for it in items)
        )
        converted = [
            ConvertedLineItem(
                **it.model_dump(),
                unit_converted=q.converted,
                subtotal_converted=q.converted * it.quantity,
                degraded=q.degraded,
            )
            for it, q in zip(items, quotes)
        ]
        subtotal = sum((c.subtotal_converted for c in converted), 0.0)
        tax = subtotal * tax_rate
        return ConversionResult(
            currency=dst,
            items=converted,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            degraded=any(c.degraded for c in converted),
        )


def build_conversion_engine(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    now: Clock = utcnow,
) -> ConversionEngine:
    """Wire provider -> cache -> engine from settings.

    The caller owns `client` and closes it; nothing here is a module global, so
    each app (or test) gets an independent cache.
    """
    provider = make_rate_provider(settings.exchange_rate_provider, settings, client, now)
    cache = RateCache(
        provider,
        capacity=settings.rates_cache_capacity,
        staleness=timedelta(seconds=settings.rates_staleness_seconds),
        now=now,
    )
    return ConversionEngine(cache, FallbackRateTable())
