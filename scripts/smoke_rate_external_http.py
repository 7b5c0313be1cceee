import asyncio
import json
import sys

import httpx

from cartfx.core.config import Settings
from cartfx.core.errors import AllEndpointsFailedError
from cartfx.services.rates.providers import HttpRateProvider

"""Smoke test for live endpoint failover.
Puts a dead endpoint first so the provider has to fail over, then prints which
endpoint answered and a few rates. Needs network access.
"""

DEAD = "https://127.0.0.1:9/latest?base={base}"


async def run(base: str = "USD"):
    settings = Settings()
    async with httpx.AsyncClient() as client:
        provider = HttpRateProvider(
            client, [DEAD, *settings.rate_endpoints], timeout=settings.http_timeout_seconds
        )
        try:
            snap = await provider.fetch_rate_table(base)
        except AllEndpointsFailedError as e:
            print(json.dumps({"error": str(e), "endpoints": list(e.endpoints)}, indent=2))
            return
    sample = {k: snap.rates[k] for k in ("EUR", "GBP", "JPY") if k in snap.rates}
    print(json.dumps({"source": snap.source, "count": len(snap.rates), "sample": sample}, indent=2))


if __name__ == "__main__":
    asyncio.run(run(*sys.argv[1:2]))
