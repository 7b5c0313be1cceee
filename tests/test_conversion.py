import asyncio
import logging
from datetime import datetime, timezone

import pytest

from cartfx.core.errors import InvalidArgument
from cartfx.models.cart import LineItem
from cartfx.services.rates.fallback import FallbackRateTable


def item(price, qty, currency="USD", id_="p"):
    return LineItem(
        id=id_, name=f"item {id_}", unit_price_base=price, currency_base=currency, quantity=qty
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["USD", "EUR", "JPY", "XYZ"])
async def test_same_currency_is_identity_without_lookup(engine, provider, code):
    assert await engine.convert_amount(42.5, code, code) == 42.5
    assert provider.calls == []


@pytest.mark.asyncio
async def test_live_rate_applied(engine):
    q = await engine.quote(100, "USD", "EUR")
    assert q.converted == 50
    assert q.source == "live"
    assert not q.degraded


@pytest.mark.asyncio
async def test_round_trip_with_reciprocal_rates(engine):
    there = await engine.convert_amount(123.0, "GBP", "EUR")
    back = await engine.convert_amount(there, "EUR", "GBP")
    assert back == 123.0


@pytest.mark.asyncio
async def test_missing_live_rate_falls_back(engine):
    # stub USD table has no JPY; fallback row does
    q = await engine.quote(100, "USD", "JPY")
    assert q.source == "fallback"
    assert q.converted == 100 * 110
    assert engine.degraded_count == 1


@pytest.mark.asyncio
async def test_unusable_live_rate_falls_back(engine, provider):
    provider.tables["USD"].update(EUR=float("nan"), GBP=-0.5)
    q = await engine.quote(100, "USD", "EUR")
    assert q.source == "fallback"
    assert q.converted == pytest.approx(85)
    assert (await engine.quote(100, "USD", "GBP")).source == "fallback"
    assert engine.degraded_count == 2


def test_fallback_lookup_normalizes_codes():
    table = FallbackRateTable()
    assert table.lookup("usd", " eur ") == table.lookup("USD", "EUR") == 0.85
    assert ("usd", "jpy") in table
    snap = table.snapshot("gbp", datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert snap.base_currency == "GBP"
    assert snap.rates["GBP"] == 1


@pytest.mark.asyncio
async def test_total_failure_uses_fallback_rate(failing_engine):
    expected = 100 * FallbackRateTable().lookup("USD", "EUR")
    assert await failing_engine.convert_amount(100, "USD", "EUR") == expected


@pytest.mark.asyncio
async def test_total_failure_without_fallback_returns_amount(failing_engine, caplog):
    with caplog.at_level(logging.WARNING, logger="cartfx.conversion"):
        q = await failing_engine.quote(100, "SEK", "NOK")
    assert q.converted == 100
    assert q.source == "unconverted"
    assert q.degraded
    assert failing_engine.degraded_count == 1
    assert any("unconverted" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_invalid_codes_raise(engine):
    with pytest.raises(InvalidArgument):
        await engine.convert_amount(1, "dollars", "EUR")
    with pytest.raises(InvalidArgument):
        await engine.convert_amount(1, "USD", "")


@pytest.mark.asyncio
async def test_line_items_same_currency_aggregate(engine, provider):
    result = await engine.convert_line_items(
        [item(10, 2, id_="a"), item(5, 1, id_="b")], "USD", 0.1
    )
    assert result.subtotal == 25
    assert result.tax == pytest.approx(2.5)
    assert result.total == pytest.approx(27.5)
    assert [i.subtotal_converted for i in result.items] == [20, 5]
    assert not result.degraded
    assert provider.calls == []


@pytest.mark.asyncio
async def test_line_items_mixed_currencies(engine):
    result = await engine.convert_line_items(
        [item(10, 3, "EUR", "a"), item(8, 1, "GBP", "b"), item(1, 0, "USD", "c")], "usd"
    )
    assert result.currency == "USD"
    assert [i.unit_converted for i in result.items] == [20, 32, 1]
    assert result.subtotal == 92
    assert result.tax == 0
    assert result.total == 92


@pytest.mark.asyncio
async def test_line_items_flag_degraded_lines(failing_engine):
    result = await failing_engine.convert_line_items(
        [item(10, 1, "USD", "a"), item(10, 1, "EUR", "b")], "EUR", 0.0
    )
    assert result.degraded
    assert [i.degraded for i in result.items] == [True, False]
    assert result.subtotal == pytest.approx(10 * 0.85 + 10)


@pytest.mark.asyncio
async def test_empty_line_items(engine):
    result = await engine.convert_line_items([], "EUR", 0.07)
    assert result.items == []
    assert (result.subtotal, result.tax, result.total) == (0, 0, 0)


@pytest.mark.asyncio
async def test_negative_tax_rate_rejected(engine):
    with pytest.raises(InvalidArgument):
        await engine.convert_line_items([item(1, 1)], "USD", -0.1)


@pytest.mark.asyncio
async def test_concurrent_misses_for_one_base_are_harmless(engine, provider, rate_cache):
    results = await asyncio.gather(
        *(engine.convert_amount(1, "USD", "GBP") for _ in range(5))
    )
    assert results == [0.25] * 5
    assert rate_cache.stats().size == 1
    # every lookup missed before the first fetch landed; last write wins
    assert provider.calls == ["USD"] * 5
    assert rate_cache.stats().fetches == 5


def test_negative_quantity_rejected():
    with pytest.raises(ValueError):
        item(1, -1)
