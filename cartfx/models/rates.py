from __future__ import annotations
from datetime import datetime
from typing import Dict, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from cartfx.core.errors import InvalidArgument
from .constants import CURRENCY_CODE_RE

ConversionSource = Literal["identity", "live", "fallback", "unconverted"]


def normalize_currency(code: str) -> str:
    """Upper-case and validate an ISO 4217-shaped code."""
    if not isinstance(code, str):
        raise InvalidArgument(f"currency code must be a string, got {type(code).__name__}")
    norm = code.strip().upper()
    if not CURRENCY_CODE_RE.match(norm):
        raise InvalidArgument(f"malformed currency code {code!r}")
    return norm


class RateSnapshot(BaseModel):
    """Full rate table for one base currency as fetched at a point in time."""

    model_config = ConfigDict(frozen=True)

    base_currency: str
    rates: Dict[str, float]
    fetched_at: datetime
    source: str = "unknown"

    @field_validator("base_currency")
    @classmethod
    def valid_base(cls, v: str) -> str:
        return normalize_currency(v)

    @model_validator(mode="after")
    def self_rate_is_one(self) -> "RateSnapshot":
        if self.rates.get(self.base_currency) != 1:
            raise ValueError("rates[base_currency] must equal 1")
        return self

    @property
    def fetched_at_epoch_millis(self) -> int:
        return int(self.fetched_at.timestamp() * 1000)


class AmountConversion(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    converted: float
    rate: float
    source: ConversionSource

    @computed_field  # type: ignore[misc]
    @property
    def degraded(self) -> bool:
        return self.source in ("fallback", "unconverted")


class RateTableOut(BaseModel):
    base_currency: str
    rates: Dict[str, float]
    fetched_at: datetime
    source: str
    degraded: bool = Field(
        False, description="True when served from the static fallback table"
    )
