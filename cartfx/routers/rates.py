from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Union

from cartfx.core.errors import AllEndpointsFailedError
from cartfx.models.rates import RateTableOut, normalize_currency
from cartfx.services.rates.cache_service import RateCache
from cartfx.services.rates.conversion import ConversionEngine
from .deps import get_engine, get_rate_cache

"""Rates router.

Endpoints:
    - GET /rates/stats   -> cache hit/miss counters
    - GET /rates/{base}  -> rate table for base; falls back to the static table
                            (degraded=true) when every endpoint fails, 502 if
                            there is no fallback row either
"""

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("/stats", summary="Rate cache statistics")
async def cache_stats(
    cache: RateCache = Depends(get_rate_cache),
) -> Dict[str, Union[int, float]]:
    return cache.stats().as_dict()


@router.get("/{base}", response_model=RateTableOut, summary="Rate table for a base currency")
async def rate_table(
    base: str,
    cache: RateCache = Depends(get_rate_cache),
    engine: ConversionEngine = Depends(get_engine),
):
    base = normalize_currency(base)
    try:
        snap = await cache.snapshot(base)
        degraded = False
    except AllEndpointsFailedError as e:
        snap = engine.fallback.snapshot(base, fetched_at=cache.now())
        if snap is None:
            raise HTTPException(status_code=502, detail=str(e)) from e
        degraded = True
    return RateTableOut(
        base_currency=snap.base_currency,
        rates=snap.rates,
        fetched_at=snap.fetched_at,
        source=snap.source,
        degraded=degraded,
    )
