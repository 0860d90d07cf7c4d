"""Position & order engine - mark open BET positions and turn dollar bets into venue orders."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog

from driftbet.errors import InvalidRequest, MarketNotFound, MarketUnavailable, VenueTransportError
from driftbet.models import BetRequest, MarketDescriptor, OrderRequest, Position
from driftbet.pricing.engine import PricingEngine
from driftbet.trading.sizing import (
    base_units_for_notional,
    direction_label,
    price_to_units,
    unrealized_pnl,
)
from driftbet.venue.base import VenueSession

log = structlog.get_logger(__name__)


class OrderEngine:
    """Reads positions and places bets through one connected venue session.

    The session is not assumed reentrant: callers serialize place_bet calls.
    """

    def __init__(
        self,
        session: VenueSession,
        pricing: PricingEngine | None = None,
        max_bet_amount: float | None = None,
    ):
        if not session.is_connected:
            raise VenueTransportError("venue session is not connected")
        self.session = session
        self.pricing = pricing or PricingEngine(session)
        self.max_bet_amount = Decimal(str(max_bet_amount)) if max_bet_amount else None

    @property
    def precision(self):
        return self.session.precision

    async def _position_for(self, market: MarketDescriptor) -> Position | None:
        raw = await self.session.get_user_position(market.market_index)
        if raw is None or raw.is_flat:
            return None
        oracle = await self.session.get_oracle_price(market.market_index)
        base = self.precision.to_base(raw.base_asset_amount)
        quote_entry = self.precision.to_quote(raw.quote_entry_amount)
        mark = self.precision.to_price(oracle)
        return Position(
            market_index=market.market_index,
            symbol=market.symbol,
            base_asset_amount=base,
            quote_entry_amount=quote_entry,
            mark_price=mark,
            unrealized_pnl=unrealized_pnl(base, mark, quote_entry),
            direction=direction_label(raw.base_asset_amount),
        )

    async def get_positions(self) -> list[Position]:
        """Open positions in prediction markets, marked at the oracle. Unreadable markets are skipped."""
        positions: list[Position] = []
        for market in await self.pricing.prediction_markets():
            try:
                position = await self._position_for(market)
            except MarketUnavailable as e:
                log.warning("position_unavailable", market_index=market.market_index, reason=e.reason)
                continue
            if position is not None:
                positions.append(position)
        return positions

    async def _resolve_market(self, market_index: int) -> MarketDescriptor:
        for market in await self.session.get_market_catalog():
            if market.market_index == market_index:
                return market
        raise MarketNotFound(market_index)

    async def build_order(self, request: BetRequest) -> OrderRequest:
        """Size a validated bet against the current oracle price."""
        await self._resolve_market(request.market_index)
        oracle = await self.session.get_oracle_price(request.market_index)
        if oracle <= 0:
            raise MarketUnavailable(request.market_index, f"non-positive oracle price {oracle}")
        base_units = base_units_for_notional(request.amount, oracle, self.precision)
        if base_units <= 0:
            raise InvalidRequest(f"bet of {request.amount} is below the minimum base unit")
        if request.limit_price is not None:
            price = price_to_units(request.limit_price, self.precision)
            if price <= 0:
                raise InvalidRequest(
                    f"limit price {request.limit_price} is below the minimum price unit"
                )
            return OrderRequest(
                market_index=request.market_index,
                direction=request.order_direction,
                base_asset_amount=base_units,
                order_kind="limit",
                price=price,
            )
        return OrderRequest(
            market_index=request.market_index,
            direction=request.order_direction,
            base_asset_amount=base_units,
        )

    async def place_bet(
        self,
        market_index: int,
        direction: str,
        amount: Any,
        limit_price: Any = None,
    ) -> str:
        """Place one YES (long) or NO (short) order sized from a quote-currency amount.

        Returns the venue's order id. Venue errors propagate unchanged; nothing is retried.
        """
        request = BetRequest.create(market_index, direction, amount, limit_price)
        if self.max_bet_amount is not None and request.amount > self.max_bet_amount:
            raise InvalidRequest(
                f"amount {request.amount} exceeds the per-bet limit of {self.max_bet_amount}"
            )
        order = await self.build_order(request)
        log.info(
            "placing_bet",
            market_index=order.market_index,
            direction=request.direction,
            amount=str(request.amount),
            order_kind=order.order_kind,
            base_asset_amount=order.base_asset_amount,
            price=order.price,
        )
        order_id = await self.session.submit_order(order)
        log.info("bet_placed", market_index=order.market_index, order_id=order_id)
        return order_id
