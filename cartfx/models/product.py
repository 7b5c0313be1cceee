from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .rates import ConversionSource, normalize_currency


class Product(BaseModel):
    id: str
    name: str
    description: str = ""
    price_base: float = Field(..., ge=0)
    currency_base: str = "USD"
    image: Optional[str] = None

    @field_validator("currency_base")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)


class PricedProduct(Product):
    price: float
    currency: str
    price_source: ConversionSource


class SuggestionOut(BaseModel):
    word: str
    product_ids: List[str]
