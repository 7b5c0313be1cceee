import json

from fastapi.testclient import TestClient
from cartfx.main import create_app
from cartfx.core.config import Settings

"""Smoke test for the provider switch.
Converts the same amount under the 'static' provider and under 'external-http'
(live endpoints) to show differing rates, or the fallback path when offline.
"""


def run():
    out = {}
    for kind in ("static", "external-http"):
        settings = Settings(exchange_rate_provider=kind)
        with TestClient(create_app(settings_override=settings)) as client:
            resp = client.get("/convert", params={"amount": 100, "from": "USD", "to": "EUR"})
            out[kind] = resp.json()
    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    run()
