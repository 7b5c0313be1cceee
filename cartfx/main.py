import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.seed import demo_products
from .models.constants import DISPLAY_CURRENCIES
from .routers import health, convert, products, rates
from .services.catalog import ProductCatalog
from .services.rates.conversion import ConversionEngine, build_conversion_engine

logger = logging.getLogger("cartfx")


def create_app(
    settings_override: Settings | None = None,
    *,
    engine: Optional[ConversionEngine] = None,
    catalog: Optional[ProductCatalog] = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    engine / catalog: inject prebuilt collaborators (tests use stub providers);
    otherwise they are built from settings when the app starts.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client: Optional[httpx.AsyncClient] = None
        if engine is None:
            client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
            app.state.engine = build_conversion_engine(settings, client)
        else:
            app.state.engine = engine
        if settings.preload_on_startup:
            loaded = await app.state.engine.rate_cache.preload(settings.preload_currencies)
            logger.info("preloaded rate tables", extra={"result": loaded})
        try:
            yield
        finally:
            if client is not None:
                await client.aclose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = catalog or ProductCatalog(demo_products())

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.InvalidArgument, errors.invalid_argument_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(convert.router)
    app.include_router(products.router)

    @app.get("/")
    async def root():
        return {
            "message": "cartfx currency conversion API",
            "version": settings.version,
            "currencies": sorted(DISPLAY_CURRENCIES),
        }

    return app


app = create_app()
