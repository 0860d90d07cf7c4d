"""Venue session protocol - the data and order surface the pricing/trading engines consume."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from driftbet.models import BookSnapshot, MarketDescriptor, OrderRequest, RawPosition


class VenuePrecision(BaseModel):
    """Fixed-point scales of the venue's integer amounts."""

    model_config = ConfigDict(frozen=True)

    base: int = Field(10**9, gt=0)
    price: int = Field(10**6, gt=0)
    quote: int = Field(10**6, gt=0)

    @classmethod
    def from_settings(cls, settings: Any) -> VenuePrecision:
        return cls(
            base=settings.base_precision,
            price=settings.price_precision,
            quote=settings.quote_precision,
        )

    def to_price(self, units: int) -> Decimal:
        return Decimal(units) / Decimal(self.price)

    def to_base(self, units: int) -> Decimal:
        return Decimal(units) / Decimal(self.base)

    def to_quote(self, units: int) -> Decimal:
        return Decimal(units) / Decimal(self.quote)

    def notional(self, base_units: int, price_units: int) -> int:
        """Quote units for base_units filled at price_units, truncated toward zero."""
        num = base_units * price_units * self.quote
        den = self.base * self.price
        q = abs(num) // den
        return q if num >= 0 else -q


class MarketDataSource(ABC):
    """Read-only market data: catalog, best bid/ask and oracle prices."""

    venue_id: str = ""
    precision: VenuePrecision

    @property
    def is_connected(self) -> bool:
        return True

    @abstractmethod
    async def get_market_catalog(self) -> list[MarketDescriptor]:
        """Return the full perp market catalog in venue order."""
        ...

    @abstractmethod
    async def get_order_book_snapshot(self, market_index: int) -> BookSnapshot:
        """Best bid/ask. Raises MarketUnavailable when the book cannot be read."""
        ...

    @abstractmethod
    async def get_oracle_price(self, market_index: int) -> int:
        """Oracle price in price precision. Raises MarketUnavailable when missing."""
        ...

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class VenueSession(MarketDataSource):
    """Market data plus the user's account: positions and order submission."""

    @abstractmethod
    async def get_user_position(self, market_index: int) -> RawPosition | None:
        """Return the user's raw position, or None when there is none."""
        ...

    @abstractmethod
    async def submit_order(self, order: OrderRequest) -> str:
        """Submit one order; return its transaction/order id."""
        ...
