from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .rates import normalize_currency


class LineItem(BaseModel):
    id: str
    name: str
    unit_price_base: float
    currency_base: str
    quantity: int = Field(1, ge=0)

    @field_validator("currency_base")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)


class ConvertedLineItem(LineItem):
    unit_converted: float
    subtotal_converted: float
    degraded: bool = False


class ConversionResult(BaseModel):
    currency: str
    items: List[ConvertedLineItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    degraded: bool = False


class CartConversionIn(BaseModel):
    items: List[LineItem]
    currency: str
    tax_rate: Optional[float] = Field(
        None, ge=0, description="Fraction, e.g. 0.07; defaults to the configured rate"
    )

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)
