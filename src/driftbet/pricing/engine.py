"""Market pricing engine - BET market filter, bid/ask and implied YES/NO probabilities."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Sequence

import structlog

from driftbet.errors import MarketUnavailable, VenueTransportError
from driftbet.models import BookSnapshot, MarketDescriptor, MarketListing, MarketQuote
from driftbet.venue.base import MarketDataSource, VenuePrecision

log = structlog.get_logger(__name__)

DEFAULT_SYMBOL_TOKENS = ("BET", "PREDICT")
DEFAULT_CATEGORY_TAG = "Prediction"


def clamp_probability(value: Decimal) -> Decimal:
    return max(Decimal(0), min(Decimal(1), value))


def compute_quote(snapshot: BookSnapshot, precision: VenuePrecision) -> MarketQuote:
    """YES costs the ask, NO costs 1 - bid; both clamped to [0, 1]. Raw bid/ask kept as-is."""
    if snapshot.best_bid is None or snapshot.best_ask is None:
        raise MarketUnavailable(snapshot.market_index, "no liquidity")
    bid = precision.to_price(snapshot.best_bid)
    ask = precision.to_price(snapshot.best_ask)
    return MarketQuote(
        market_index=snapshot.market_index,
        bid_price=bid,
        ask_price=ask,
        yes_price=clamp_probability(ask),
        no_price=clamp_probability(Decimal(1) - bid),
    )


class PricingEngine:
    """Lists prediction markets with YES/NO prices from a connected market data source."""

    def __init__(
        self,
        source: MarketDataSource,
        symbol_tokens: Sequence[str] = DEFAULT_SYMBOL_TOKENS,
        category_tag: str = DEFAULT_CATEGORY_TAG,
    ):
        if not source.is_connected:
            raise VenueTransportError("market data source is not connected")
        self.source = source
        self.symbol_tokens = tuple(symbol_tokens)
        self.category_tag = category_tag

    def is_prediction_market(self, market: MarketDescriptor) -> bool:
        if any(token in market.symbol for token in self.symbol_tokens):
            return True
        return self.category_tag in market.category

    async def prediction_markets(self) -> list[MarketDescriptor]:
        """Catalog entries that are prediction markets, in catalog order."""
        catalog = await self.source.get_market_catalog()
        return [m for m in catalog if self.is_prediction_market(m)]

    async def quote_market(self, market: MarketDescriptor) -> MarketQuote:
        """Current quote for one market. Raises MarketUnavailable."""
        snapshot = await self.source.get_order_book_snapshot(market.market_index)
        return compute_quote(snapshot, self.source.precision)

    async def _quote_or_unavailable(self, market: MarketDescriptor) -> MarketListing:
        try:
            quote = await self.quote_market(market)
        except MarketUnavailable as e:
            log.warning("market_unavailable", market_index=market.market_index, reason=e.reason)
            quote = MarketQuote.unavailable(market.market_index, e.reason)
        return MarketListing(descriptor=market, quote=quote)

    async def list_prediction_markets(self) -> list[MarketListing]:
        """One listing per prediction market in catalog order; unreadable books become unavailable quotes."""
        markets = await self.prediction_markets()
        listings = await asyncio.gather(*(self._quote_or_unavailable(m) for m in markets))
        log.debug(
            "listed_prediction_markets",
            total=len(listings),
            unavailable=sum(1 for item in listings if not item.quote.available),
        )
        return list(listings)
