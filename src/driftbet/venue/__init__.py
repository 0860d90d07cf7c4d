"""Venue sessions: protocol, DLOB market data and the paper venue."""

from __future__ import annotations

from typing import Any

from driftbet.venue.base import MarketDataSource, VenuePrecision, VenueSession
from driftbet.venue.dlob import DlobMarketData, parse_catalog
from driftbet.venue.paper import PaperVenue

__all__ = [
    "MarketDataSource",
    "VenuePrecision",
    "VenueSession",
    "DlobMarketData",
    "PaperVenue",
    "parse_catalog",
    "create_session",
]


def create_session(settings: Any) -> VenueSession:
    """Build the venue session selected by settings (connect it with `async with`)."""
    if settings.venue_mode != "paper":
        raise ValueError(f"Unsupported venue mode: {settings.venue_mode!r} (only 'paper' is available)")
    return PaperVenue(
        DlobMarketData.from_settings(settings),
        db_path=settings.paper_db_path,
        account=settings.paper_account,
        starting_collateral=settings.paper_starting_collateral,
    )
