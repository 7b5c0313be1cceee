"""Request-scoped accessors for objects built once in create_app."""

from fastapi import Request

from cartfx.core.config import Settings
from cartfx.services.catalog import ProductCatalog
from cartfx.services.rates.cache_service import RateCache
from cartfx.services.rates.conversion import ConversionEngine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> ConversionEngine:
    return request.app.state.engine


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.engine.rate_cache


def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog
