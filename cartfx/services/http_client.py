from __future__ import annotations

"""Async HTTP helper for JSON GETs with limited retries.

Every way a request can go wrong (transport error, timeout, non-2xx status,
body that is not JSON) is folded into EndpointFailure, so callers doing
failover only have one exception to catch.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from cartfx.core.errors import EndpointFailure

logger = logging.getLogger("cartfx.http")

JSON_HEADERS = {"Accept": "application/json"}


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    last_err: Optional[str] = None
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, timeout=timeout, headers=JSON_HEADERS)
            if not resp.is_success:
                raise EndpointFailure(url, f"HTTP {resp.status_code}")
            data = resp.json()
            if not isinstance(data, dict):
                raise EndpointFailure(url, "response body is not a JSON object")
            return data
        except httpx.TimeoutException:
            last_err = f"timed out after {timeout}s"
        except httpx.HTTPError as e:
            last_err = f"{type(e).__name__}: {e}"
        except ValueError as e:  # JSON decode
            last_err = f"invalid JSON: {e}"
        except EndpointFailure as e:
            last_err = e.reason
        if attempt < retries:
            logger.debug(
                "retrying request",
                extra={"url": url, "attempt": attempt + 1, "reason": last_err},
            )
            await asyncio.sleep(backoff * (2**attempt))
    raise EndpointFailure(url, last_err or "unknown error")
