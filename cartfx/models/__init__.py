"""Pydantic domain models for the cartfx conversion engine."""

from .constants import (
    CURRENCY_CODE_RE,
    DISPLAY_CURRENCIES,
    FALLBACK_RATES,
    MOCK_RATES,
    SORT_OPTIONS,
)  # re-export
from .cart import CartConversionIn, ConversionResult, ConvertedLineItem, LineItem
from .product import PricedProduct, Product, SuggestionOut
from .rates import AmountConversion, RateSnapshot, RateTableOut, normalize_currency

__all__ = [
    "CURRENCY_CODE_RE",
    "DISPLAY_CURRENCIES",
    "FALLBACK_RATES",
    "MOCK_RATES",
    "SORT_OPTIONS",
    "CartConversionIn",
    "ConversionResult",
    "ConvertedLineItem",
    "LineItem",
    "PricedProduct",
    "Product",
    "SuggestionOut",
    "AmountConversion",
    "RateSnapshot",
    "RateTableOut",
    "normalize_currency",
]
