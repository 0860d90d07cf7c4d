"""Error taxonomy shared by the venue, pricing, trading and journal layers."""

from __future__ import annotations


class DriftBetError(Exception):
    """Base for all driftbet errors."""


class InvalidRequest(DriftBetError):
    """Malformed bet parameters. Raised before any venue call is made."""


class MarketNotFound(DriftBetError):
    """Unknown market index."""

    def __init__(self, market_index: int):
        super().__init__(f"Market {market_index} not found")
        self.market_index = market_index


class MarketUnavailable(DriftBetError):
    """A single market's book, oracle or position could not be read."""

    def __init__(self, market_index: int, reason: str = ""):
        message = f"Market {market_index} unavailable"
        super().__init__(f"{message}: {reason}" if reason else message)
        self.market_index = market_index
        self.reason = reason


class VenueError(DriftBetError):
    """Failure reported by the venue or its transport."""


class VenueTransportError(VenueError):
    """Network or session failure. Fatal to the current call."""


class OrderRejected(VenueError):
    """Venue refused the order (e.g. insufficient collateral)."""


class AccountNotFound(VenueError):
    """No trading account exists for this wallet."""


class JournalError(DriftBetError):
    """Paper-trading journal bookkeeping error."""
