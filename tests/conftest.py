"""Shared fixtures: an in-memory venue that records every call."""

from __future__ import annotations

from decimal import Decimal

import pytest

from driftbet.errors import MarketUnavailable
from driftbet.models import BookSnapshot, MarketDescriptor, OrderRequest, RawPosition
from driftbet.venue.base import VenuePrecision, VenueSession


def px(value: str | float) -> int:
    """Price/probability -> venue price units (1e6)."""
    return int(Decimal(str(value)) * 10**6)


def base(value: str | float) -> int:
    """Contracts -> venue base units (1e9)."""
    return int(Decimal(str(value)) * 10**9)


def quote(value: str | float) -> int:
    """Dollars -> venue quote units (1e6)."""
    return int(Decimal(str(value)) * 10**6)


CATALOG = [
    MarketDescriptor(market_index=0, symbol="SOL-PERP", full_name="Solana", category=("L1",)),
    MarketDescriptor(
        market_index=36,
        symbol="TRUMP-WIN-2024-BET",
        full_name="Trump wins 2024",
        category=("Prediction", "Election"),
    ),
    MarketDescriptor(market_index=1, symbol="BTC-PERP", full_name="Bitcoin", category=("L1",)),
    MarketDescriptor(
        market_index=37,
        symbol="KAMALA-POPULAR-VOTE-2024-BET",
        category=("Prediction",),
    ),
    MarketDescriptor(market_index=45, symbol="FED-CUT-MARCH", category=("Prediction", "Macro")),
]


class FakeVenue(VenueSession):
    """Venue session backed by dicts. Values that are exceptions are raised when read."""

    venue_id = "fake"

    def __init__(
        self,
        catalog: list[MarketDescriptor] | None = None,
        books: dict | None = None,
        oracles: dict | None = None,
        positions: dict | None = None,
        precision: VenuePrecision | None = None,
        order_result: str | Exception = "tx-1",
    ):
        self.catalog = list(CATALOG if catalog is None else catalog)
        self.books = books or {}
        self.oracles = oracles or {}
        self.positions = positions or {}
        self.precision = precision or VenuePrecision()
        self.order_result = order_result
        self.calls: list[tuple[str, object]] = []
        self.submitted: list[OrderRequest] = []

    @staticmethod
    def _read(table: dict, market_index: int, what: str):
        value = table.get(market_index)
        if value is None:
            raise MarketUnavailable(market_index, f"no {what}")
        if isinstance(value, Exception):
            raise value
        return value

    async def get_market_catalog(self) -> list[MarketDescriptor]:
        self.calls.append(("get_market_catalog", None))
        return list(self.catalog)

    async def get_order_book_snapshot(self, market_index: int) -> BookSnapshot:
        self.calls.append(("get_order_book_snapshot", market_index))
        bid, ask = self._read(self.books, market_index, "book")
        return BookSnapshot(
            market_index=market_index,
            best_bid=None if bid is None else px(bid),
            best_ask=None if ask is None else px(ask),
        )

    async def get_oracle_price(self, market_index: int) -> int:
        self.calls.append(("get_oracle_price", market_index))
        return px(self._read(self.oracles, market_index, "oracle"))

    async def get_user_position(self, market_index: int) -> RawPosition | None:
        self.calls.append(("get_user_position", market_index))
        value = self.positions.get(market_index)
        if isinstance(value, Exception):
            raise value
        if value is None:
            return None
        base_amount, quote_entry = value
        return RawPosition(
            market_index=market_index,
            base_asset_amount=base(base_amount),
            quote_entry_amount=quote(quote_entry),
        )

    async def submit_order(self, order: OrderRequest) -> str:
        self.calls.append(("submit_order", order))
        self.submitted.append(order)
        if isinstance(self.order_result, Exception):
            raise self.order_result
        return self.order_result


@pytest.fixture
def venue() -> FakeVenue:
    return FakeVenue(
        books={36: ("0.30", "0.38"), 37: ("0.55", "0.58"), 45: ("0.10", "0.12")},
        oracles={0: "150", 36: "0.40", 37: "0.56", 45: "0.11"},
    )
