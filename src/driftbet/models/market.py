"""MarketDescriptor, BookSnapshot, MarketQuote - prediction market pricing entities."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Price reported for markets whose book cannot be read
UNAVAILABLE = Decimal(-1)


class MarketDescriptor(BaseModel):
    """One entry of the venue's perp market catalog."""

    model_config = ConfigDict(frozen=True)

    market_index: int = Field(..., ge=0)
    symbol: str
    full_name: str = ""
    category: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.full_name or self.symbol


class BookSnapshot(BaseModel):
    """Best bid/ask as venue fixed-point integers (price precision). A side may be empty."""

    market_index: int
    best_bid: int | None = None
    best_ask: int | None = None


class MarketQuote(BaseModel):
    """Point-in-time YES/NO pricing for one market.

    yes_price is the ask clamped to [0, 1]; no_price is 1 - bid clamped to [0, 1].
    Raw bid/ask are kept unclamped. Unavailable quotes carry UNAVAILABLE in every price.
    """

    market_index: int
    bid_price: Decimal
    ask_price: Decimal
    yes_price: Decimal
    no_price: Decimal
    status: Literal["ok", "unavailable"] = "ok"
    reason: str | None = None

    @classmethod
    def unavailable(cls, market_index: int, reason: str = "") -> MarketQuote:
        return cls(
            market_index=market_index,
            bid_price=UNAVAILABLE,
            ask_price=UNAVAILABLE,
            yes_price=UNAVAILABLE,
            no_price=UNAVAILABLE,
            status="unavailable",
            reason=reason or None,
        )

    @property
    def available(self) -> bool:
        return self.status == "ok"

    @property
    def spread(self) -> Decimal | None:
        if not self.available:
            return None
        return self.ask_price - self.bid_price


class MarketListing(BaseModel):
    """A catalog entry paired with its current quote."""

    descriptor: MarketDescriptor
    quote: MarketQuote
