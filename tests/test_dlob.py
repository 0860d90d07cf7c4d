"""DLOB market data source against a mocked HTTP transport."""

import asyncio

import httpx
import pytest

from driftbet.errors import MarketUnavailable, VenueTransportError
from driftbet.pricing import PricingEngine
from driftbet.venue.dlob import DlobMarketData, parse_catalog
from driftbet.venue.rate_limit import TokenBucket

CATALOG_ROWS = [
    {"market_index": 0, "symbol": "SOL-PERP", "category": ["L1"]},
    {"market_index": 36, "symbol": "TRUMP-WIN-2024-BET", "full_name": "Trump wins", "category": ["Prediction"]},
    {"market_index": 37, "symbol": "KAMALA-POPULAR-VOTE-2024-BET", "category": ["Prediction"]},
    {"market_index": 41, "symbol": "BREAKPOINT-IGGYERIC-BET"},
]

L2 = {
    36: {
        "marketIndex": 36,
        "bids": [{"price": "300000", "size": "1000000000"}],
        "asks": [{"price": "380000", "size": "2000000000"}],
        "oracleData": {"price": "420000", "slot": "1"},
    },
    37: {"marketIndex": 37, "bids": [], "asks": [{"price": "580000", "size": "1"}], "oracle": 560000},
}


def _handler(request: httpx.Request) -> httpx.Response:
    assert request.url.path == "/l2"
    assert request.url.params["marketType"] == "perp"
    index = int(request.url.params["marketIndex"])
    if index == 41:
        return httpx.Response(404, json={"error": "market not found"})
    if index == 0:
        return httpx.Response(503, text="unavailable")
    return httpx.Response(200, json=L2[index])


def _source(handler=_handler):
    return DlobMarketData(
        parse_catalog(CATALOG_ROWS),
        base_url="https://dlob.test",
        transport=httpx.MockTransport(handler),
        requests_per_sec=1000,
    )


def _run(source, coro_fn):
    async def main():
        async with source:
            return await coro_fn(source)

    return asyncio.run(main())


def test_parse_catalog_skips_bad_rows():
    markets = parse_catalog(CATALOG_ROWS + [{"symbol": "NO-INDEX"}, {"market_index": "x", "symbol": "BAD"}])
    assert [m.market_index for m in markets] == [0, 36, 37, 41]
    assert markets[1].full_name == "Trump wins"
    assert markets[2].full_name == "KAMALA-POPULAR-VOTE-2024-BET"
    assert markets[3].category == ()


def test_book_and_oracle_parsed():
    async def scenario(source):
        return await source.get_order_book_snapshot(36), await source.get_oracle_price(36)

    snapshot, oracle = _run(_source(), scenario)
    assert snapshot.best_bid == 300_000
    assert snapshot.best_ask == 380_000
    assert oracle == 420_000


def test_empty_side_and_plain_oracle_field():
    async def scenario(source):
        return await source.get_order_book_snapshot(37), await source.get_oracle_price(37)

    snapshot, oracle = _run(_source(), scenario)
    assert snapshot.best_bid is None
    assert snapshot.best_ask == 580_000
    assert oracle == 560_000


def test_client_error_is_market_unavailable():
    async def scenario(source):
        return await source.get_order_book_snapshot(41)

    with pytest.raises(MarketUnavailable):
        _run(_source(), scenario)


def test_market_outside_catalog_is_unavailable():
    async def scenario(source):
        return await source.get_oracle_price(99)

    with pytest.raises(MarketUnavailable):
        _run(_source(), scenario)


def test_server_error_is_transport_error():
    async def scenario(source):
        return await source.get_order_book_snapshot(0)

    with pytest.raises(VenueTransportError):
        _run(_source(), scenario)


def test_network_failure_is_transport_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario(source):
        return await source.get_order_book_snapshot(36)

    with pytest.raises(VenueTransportError):
        _run(_source(refuse), scenario)


def test_undecodable_body_is_market_unavailable():
    def garbage(request):
        return httpx.Response(200, text="<html>")

    async def scenario(source):
        return await source.get_order_book_snapshot(36)

    with pytest.raises(MarketUnavailable):
        _run(_source(garbage), scenario)


def test_requires_connect():
    with pytest.raises(VenueTransportError):
        asyncio.run(_source().get_order_book_snapshot(36))


def test_listing_over_dlob_isolates_failures():
    async def scenario(source):
        return await PricingEngine(source).list_prediction_markets()

    listings = _run(_source(), scenario)
    assert [item.descriptor.market_index for item in listings] == [36, 37, 41]
    assert [item.quote.available for item in listings] == [True, False, False]
    assert str(listings[0].quote.yes_price) == "0.38"


def test_zero_request_rate_rejected():
    with pytest.raises(ValueError):
        TokenBucket(rate=0)
    with pytest.raises(ValueError):
        DlobMarketData(parse_catalog(CATALOG_ROWS), base_url="https://dlob.test", requests_per_sec=0)
