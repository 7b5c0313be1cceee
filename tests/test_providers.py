"""HTTP provider failover, driven through httpx.MockTransport (no network)."""

import httpx
import pytest

from cartfx.core.config import Settings
from cartfx.core.errors import AllEndpointsFailedError, EndpointFailure, InvalidArgument
from cartfx.services.rates.providers import (
    HttpRateProvider,
    StaticRateProvider,
    make_rate_provider,
    parse_rates,
)

PRIMARY = "https://primary.test/latest?base={base}"
SECONDARY = "https://secondary.test/latest?base={base}"
TERTIARY = "https://tertiary.test/v6/latest/{base}"


def client_for(routes, seen):
    """routes: host -> callable(request) returning an httpx.Response."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return routes[request.url.host](request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def ok(rates):
    return lambda request: httpx.Response(200, json={"rates": rates})


def status(code):
    return lambda request: httpx.Response(code, json={"error": "nope"})


def boom(request):
    raise httpx.ConnectError("connection refused", request=request)


def slow(request):
    raise httpx.ReadTimeout("timed out", request=request)


@pytest.mark.asyncio
async def test_first_success_wins_and_rest_untouched(clock):
    seen = []
    routes = {"primary.test": ok({"EUR": 0.9}), "secondary.test": ok({"EUR": 0.1})}
    async with client_for(routes, seen) as client:
        provider = HttpRateProvider(client, [PRIMARY, SECONDARY], now=clock)
        snap = await provider.fetch_rate_table("USD")
    assert snap.rates["EUR"] == 0.9
    assert snap.source == "https://primary.test/latest?base=USD"
    assert snap.fetched_at == clock.now
    assert seen == ["https://primary.test/latest?base=USD"]


@pytest.mark.asyncio
async def test_fails_over_in_order(clock):
    seen = []
    routes = {
        "primary.test": status(503),
        "secondary.test": boom,
        "tertiary.test": ok({"GBP": 0.8}),
    }
    async with client_for(routes, seen) as client:
        provider = HttpRateProvider(client, [PRIMARY, SECONDARY, TERTIARY], now=clock)
        snap = await provider.fetch_rate_table("usd")
    assert snap.base_currency == "USD"
    assert snap.rates == {"GBP": 0.8, "USD": 1.0}
    assert [u.split("/")[2] for u in seen] == ["primary.test", "secondary.test", "tertiary.test"]
    assert seen[-1] == "https://tertiary.test/v6/latest/USD"


@pytest.mark.asyncio
async def test_timeout_and_malformed_bodies_count_as_failures(clock):
    seen = []
    routes = {
        "primary.test": slow,
        "secondary.test": lambda r: httpx.Response(200, text="<html>oops</html>"),
        "tertiary.test": lambda r: httpx.Response(200, json={"result": "error"}),
    }
    async with client_for(routes, seen) as client:
        provider = HttpRateProvider(client, [PRIMARY, SECONDARY, TERTIARY], now=clock)
        with pytest.raises(AllEndpointsFailedError) as exc_info:
            await provider.fetch_rate_table("EUR")
    err = exc_info.value
    assert err.base_currency == "EUR"
    assert err.endpoints == (
        "https://primary.test/latest?base=EUR",
        "https://secondary.test/latest?base=EUR",
        "https://tertiary.test/v6/latest/EUR",
    )
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_self_rate_forced_to_one(clock):
    routes = {"primary.test": ok({"USD": 0.97, "EUR": 0.9})}
    async with client_for(routes, []) as client:
        snap = await HttpRateProvider(client, [PRIMARY], now=clock).fetch_rate_table("USD")
    assert snap.rates["USD"] == 1


@pytest.mark.asyncio
async def test_retries_same_endpoint_before_failover(clock):
    seen = []
    attempts = {"n": 0}

    def flaky(request):
        attempts["n"] += 1
        if attempts["n"] == 1:
            return httpx.Response(500)
        return httpx.Response(200, json={"rates": {"JPY": 150}})

    async with client_for({"primary.test": flaky}, seen) as client:
        provider = HttpRateProvider(client, [PRIMARY], retries=1, backoff=0, now=clock)
        snap = await provider.fetch_rate_table("USD")
    assert snap.rates["JPY"] == 150
    assert len(seen) == 2


def test_parse_rates_drops_non_numeric_entries():
    rates = parse_rates("u", {"rates": {"eur": 0.9, "BAD": "x", "FLAG": True}}, "USD")
    assert rates == {"EUR": 0.9, "USD": 1.0}


def test_parse_rates_drops_non_positive_and_non_finite_rates():
    body = {"rates": {"EUR": 0.9, "GBP": 0, "JPY": -110, "CHF": float("inf"), "SEK": float("nan")}}
    assert parse_rates("u", body, "USD") == {"EUR": 0.9, "USD": 1.0}


def test_parse_rates_rejects_body_with_only_junk_rates():
    with pytest.raises(EndpointFailure):
        parse_rates("u", {"rates": {"EUR": -1, "GBP": "x", "USD": 1}}, "USD")


@pytest.mark.asyncio
async def test_non_finite_body_fails_over_to_next_endpoint(clock):
    seen = []
    # json accepts the NaN and Infinity literals some upstreams emit
    junk = lambda request: httpx.Response(
        200,
        content=b'{"rates": {"EUR": NaN, "GBP": Infinity}}',
        headers={"content-type": "application/json"},
    )
    routes = {"primary.test": junk, "secondary.test": ok({"EUR": 0.92, "GBP": 0.79})}
    async with client_for(routes, seen) as client:
        provider = HttpRateProvider(client, [PRIMARY, SECONDARY], now=clock)
        snap = await provider.fetch_rate_table("USD")
    assert snap.rates == {"EUR": 0.92, "GBP": 0.79, "USD": 1.0}
    assert snap.source == "https://secondary.test/latest?base=USD"
    assert len(seen) == 2


def test_provider_needs_an_endpoint():
    with pytest.raises(InvalidArgument):
        HttpRateProvider(None, [])  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_static_provider_serves_mock_tables(clock):
    provider = StaticRateProvider(now=clock)
    snap = await provider.fetch_rate_table("EUR")
    assert snap.rates["EUR"] == 1
    assert snap.rates["USD"] == pytest.approx(1.09)
    with pytest.raises(AllEndpointsFailedError):
        await provider.fetch_rate_table("ZAR")


def test_factory():
    settings = Settings(exchange_rate_provider="static")
    assert isinstance(make_rate_provider("static", settings), StaticRateProvider)
    with pytest.raises(InvalidArgument):
        make_rate_provider("external-http", settings)
    with pytest.raises(ValueError):
        make_rate_provider("carrier-pigeon", settings)
