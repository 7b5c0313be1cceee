from __future__ import annotations

from typing import Iterable, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("cartfx.errors")


class EndpointFailure(Exception):
    """A single rate endpoint returned a bad status, timed out or sent junk."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class AllEndpointsFailedError(Exception):
    """Every configured endpoint failed for one base currency."""

    def __init__(self, base_currency: str, endpoints: Iterable[str]):
        self.base_currency = base_currency
        self.endpoints: Tuple[str, ...] = tuple(endpoints)
        super().__init__(
            f"All rate endpoints failed for {base_currency} "
            f"(tried {len(self.endpoints)}: {', '.join(self.endpoints) or 'none'})"
        )


class InvalidArgument(ValueError):
    """Caller bug: malformed currency code, bad capacity, negative tax rate..."""


def not_found_handler(request: Request, exc):  # type: ignore
    if getattr(exc, "status_code", 404) != 404:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def invalid_argument_handler(request: Request, exc: InvalidArgument):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid_argument", "detail": str(exc)},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
