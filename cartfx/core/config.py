from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_RATE_PROVIDERS = {"static", "external-http"}

DEFAULT_RATE_ENDPOINTS: List[str] = [
    "https://api.exchangerate.host/latest?base={base}",
    "https://api.fxratesapi.com/latest?base={base}",
    "https://open.er-api.com/v6/latest/{base}",
]


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_RATE_PROVIDER, RATES_STALENESS_SECONDS). List fields take JSON
    (RATE_ENDPOINTS='["https://.../latest?base={base}"]').
    """

    # Basic app metadata
    app_name: str = "cartfx"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rate provider
    # Allowed: 'static' (built-in mock tables, no network), 'external-http' (endpoint failover)
    exchange_rate_provider: str = "external-http"
    # Tried strictly in order; '{base}' is replaced by the base currency code
    rate_endpoints: List[str] = list(DEFAULT_RATE_ENDPOINTS)

    # Rate caching
    rates_staleness_seconds: int = 300  # 5 minutes
    rates_cache_capacity: int = 100
    preload_currencies: List[str] = ["USD", "EUR", "GBP", "JPY", "CAD", "AUD"]
    preload_on_startup: bool = False

    # HTTP
    http_timeout_seconds: float = 5.0
    http_retries: int = 0  # per endpoint, before failing over
    http_backoff_seconds: float = 0.5

    # Checkout
    default_currency: str = "USD"
    default_tax_rate: float = 0.07

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("exchange_rate_provider")
    @classmethod
    def known_provider(cls, v: str) -> str:
        if v not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{v}'. Allowed: {ALLOWED_RATE_PROVIDERS}"
            )
        return v

    @field_validator("rate_endpoints")
    @classmethod
    def at_least_one_endpoint(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("rate_endpoints must list at least one endpoint")
        return v

    @field_validator("rates_staleness_seconds", "rates_cache_capacity")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("default_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
