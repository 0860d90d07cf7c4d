"""Canonical schema (Pydantic) - MarketDescriptor, MarketQuote, Position, BetRequest, journal."""

from driftbet.models.journal import JournalPortfolio, JournalTrade
from driftbet.models.market import (
    UNAVAILABLE,
    BookSnapshot,
    MarketDescriptor,
    MarketListing,
    MarketQuote,
)
from driftbet.models.order import BetRequest, OrderRequest
from driftbet.models.position import Position, RawPosition

__all__ = [
    "UNAVAILABLE",
    "MarketDescriptor",
    "BookSnapshot",
    "MarketQuote",
    "MarketListing",
    "RawPosition",
    "Position",
    "BetRequest",
    "OrderRequest",
    "JournalTrade",
    "JournalPortfolio",
]
