"""RawPosition, Position - user exposure in a market."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

PositionLabel = Literal["YES", "NO", "NONE"]


class RawPosition(BaseModel):
    """Venue-native position amounts (base and quote precision integers)."""

    market_index: int
    base_asset_amount: int = 0
    quote_entry_amount: int = 0

    @property
    def is_flat(self) -> bool:
        return self.base_asset_amount == 0


class Position(BaseModel):
    """Open position marked at the oracle price."""

    market_index: int
    symbol: str
    base_asset_amount: Decimal
    quote_entry_amount: Decimal
    mark_price: Decimal
    unrealized_pnl: Decimal
    direction: PositionLabel
