from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cartfx.core.config import Settings
from cartfx.models.cart import CartConversionIn, ConversionResult
from cartfx.models.rates import AmountConversion
from cartfx.services.rates.conversion import ConversionEngine
from .deps import get_app_settings, get_engine

"""Conversion router.

Both endpoints always answer with numbers while the inputs are well formed;
`degraded` tells the client that fallback or identity rates were used.
"""

router = APIRouter(prefix="/convert", tags=["convert"])


@router.get("", response_model=AmountConversion, summary="Convert a single amount")
async def convert_amount(
    amount: float = Query(..., description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from", description="ISO 4217 source code"),
    to_currency: str = Query(..., alias="to", description="ISO 4217 target code"),
    engine: ConversionEngine = Depends(get_engine),
):
    return await engine.quote(amount, from_currency, to_currency)


@router.post("/cart", response_model=ConversionResult, summary="Convert priced line items")
async def convert_cart(
    payload: CartConversionIn,
    engine: ConversionEngine = Depends(get_engine),
    settings: Settings = Depends(get_app_settings),
):
    tax_rate = payload.tax_rate if payload.tax_rate is not None else settings.default_tax_rate
    return await engine.convert_line_items(payload.items, payload.currency, tax_rate)
