"""Order engine: exact bet sizing, input rejection, error propagation and position P&L."""

import asyncio
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import FakeVenue
from driftbet.errors import (
    InvalidRequest,
    MarketNotFound,
    MarketUnavailable,
    OrderRejected,
    VenueTransportError,
)
from driftbet.models import BetRequest, OrderRequest
from driftbet.trading import OrderEngine
from driftbet.trading.sizing import (
    base_units_for_notional,
    direction_label,
    price_to_units,
    unrealized_pnl,
)
from driftbet.venue.base import VenuePrecision


def test_base_units_exact_for_ten_dollars_at_forty_cents():
    assert base_units_for_notional(Decimal("10"), 400_000, VenuePrecision()) == 25 * 10**9


def test_base_units_floor_non_terminating():
    # 10 / 0.30 = 33.333... contracts
    assert base_units_for_notional(Decimal("10"), 300_000, VenuePrecision()) == 33_333_333_333


def test_base_units_follow_configured_precision():
    precision = VenuePrecision(base=10**6, price=10**4)
    assert base_units_for_notional(Decimal("10"), 4_000, precision) == 25 * 10**6


def test_base_units_reject_non_positive_price():
    with pytest.raises(ValueError):
        base_units_for_notional(Decimal("10"), 0, VenuePrecision())


def test_price_to_units():
    assert price_to_units(Decimal("0.35"), VenuePrecision()) == 350_000
    assert price_to_units(Decimal("0.1234567"), VenuePrecision()) == 123_456


def test_direction_label_from_sign():
    assert direction_label(5) == "YES"
    assert direction_label(-1) == "NO"
    assert direction_label(0) == "NONE"


def test_unrealized_pnl_formula():
    assert unrealized_pnl(Decimal(100), Decimal("0.42"), Decimal(-35)) == Decimal("7.00")


def test_place_yes_bet_sizes_market_order(venue):
    engine = OrderEngine(venue)
    order_id = asyncio.run(engine.place_bet(36, "YES", 10))
    assert order_id == "tx-1"
    assert len(venue.submitted) == 1
    order = venue.submitted[0]
    assert order.market_index == 36
    assert order.direction == "LONG"
    assert order.order_kind == "market"
    assert order.price is None
    assert order.base_asset_amount == 25_000_000_000


def test_place_no_bet_is_short(venue):
    asyncio.run(OrderEngine(venue).place_bet(36, "no", 10))
    order = venue.submitted[0]
    assert order.direction == "SHORT"
    assert order.base_asset_amount == 25_000_000_000


def test_place_limit_bet(venue):
    asyncio.run(OrderEngine(venue).place_bet(36, "NO", 5, 0.35))
    order = venue.submitted[0]
    assert order.order_kind == "limit"
    assert order.price == 350_000
    assert order.direction == "SHORT"
    assert order.base_asset_amount == 12_500_000_000


def test_unknown_market_raises_not_found(venue):
    with pytest.raises(MarketNotFound):
        asyncio.run(OrderEngine(venue).place_bet(999999, "YES", 10))
    assert venue.submitted == []


@pytest.mark.parametrize(
    "direction, amount, limit",
    [
        ("MAYBE", 10, None),
        ("", 10, None),
        ("YES", 0, None),
        ("YES", -5, None),
        ("YES", float("nan"), None),
        ("YES", float("inf"), None),
        ("YES", "ten", None),
        ("YES", 10, 0),
        ("YES", 10, 1),
        ("NO", 10, 1.5),
    ],
)
def test_invalid_request_rejected_before_any_venue_call(venue, direction, amount, limit):
    with pytest.raises(InvalidRequest):
        asyncio.run(OrderEngine(venue).place_bet(36, direction, amount, limit))
    assert venue.calls == []


def test_bet_request_normalizes_direction():
    request = BetRequest.create(36, " yes ", "2.5")
    assert request.direction == "YES"
    assert request.amount == Decimal("2.5")
    assert request.order_direction == "LONG"


def test_max_bet_amount_enforced(venue):
    engine = OrderEngine(venue, max_bet_amount=100)
    with pytest.raises(InvalidRequest):
        asyncio.run(engine.place_bet(36, "YES", 150))
    assert venue.calls == []
    assert asyncio.run(engine.place_bet(36, "YES", 100)) == "tx-1"


def test_venue_rejection_propagates_unchanged(venue):
    rejection = OrderRejected("insufficient collateral")
    venue.order_result = rejection
    with pytest.raises(OrderRejected) as excinfo:
        asyncio.run(OrderEngine(venue).place_bet(36, "YES", 10))
    assert excinfo.value is rejection
    assert len(venue.submitted) == 1


def test_transport_failure_is_not_retried(venue):
    venue.order_result = VenueTransportError("timeout")
    with pytest.raises(VenueTransportError):
        asyncio.run(OrderEngine(venue).place_bet(36, "YES", 10))
    assert sum(1 for name, _ in venue.calls if name == "submit_order") == 1


def test_non_positive_oracle_price_is_unavailable(venue):
    venue.oracles[36] = "0"
    with pytest.raises(MarketUnavailable):
        asyncio.run(OrderEngine(venue).place_bet(36, "YES", 10))
    assert venue.submitted == []


def test_positions_pnl_scenario():
    venue = FakeVenue(
        oracles={36: "0.42", 37: "0.42"},
        positions={36: ("100", "-35"), 37: ("-50", "30")},
    )
    positions = asyncio.run(OrderEngine(venue).get_positions())
    assert [p.market_index for p in positions] == [36, 37]
    yes, no = positions
    assert yes.direction == "YES"
    assert yes.base_asset_amount == Decimal(100)
    assert yes.quote_entry_amount == Decimal(-35)
    assert yes.mark_price == Decimal("0.42")
    assert yes.unrealized_pnl == Decimal("7.0")
    assert no.direction == "NO"
    assert no.unrealized_pnl == Decimal(9)


def test_positions_skip_flat_absent_and_non_prediction_markets():
    venue = FakeVenue(
        oracles={0: "150", 36: "0.40", 37: "0.50", 45: "0.11"},
        positions={0: ("2", "-300"), 36: ("0", "0"), 45: ("10", "-1")},
    )
    positions = asyncio.run(OrderEngine(venue).get_positions())
    assert [p.market_index for p in positions] == [45]
    assert positions[0].unrealized_pnl == Decimal("0.10")


def test_positions_skip_unreadable_market():
    venue = FakeVenue(
        oracles={36: MarketUnavailable(36, "oracle missing"), 37: "0.50"},
        positions={36: ("100", "-35"), 37: ("10", "-4"), 45: MarketUnavailable(45, "decode")},
    )
    positions = asyncio.run(OrderEngine(venue).get_positions())
    assert [p.market_index for p in positions] == [37]
    assert positions[0].unrealized_pnl == Decimal(1)


def test_negative_market_index_raises_not_found(venue):
    with pytest.raises(MarketNotFound):
        asyncio.run(OrderEngine(venue).place_bet(-1, "YES", 10))
    assert venue.submitted == []


def test_limit_below_one_price_unit_rejected(venue):
    with pytest.raises(InvalidRequest):
        asyncio.run(OrderEngine(venue).place_bet(36, "NO", 10, "0.0000001"))
    assert venue.submitted == []
    assert not any(name == "submit_order" for name, _ in venue.calls)


def test_order_request_rejects_zero_price():
    with pytest.raises(ValidationError):
        OrderRequest(
            market_index=36,
            direction="SHORT",
            base_asset_amount=10**9,
            order_kind="limit",
            price=0,
        )
