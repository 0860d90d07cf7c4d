"""BetRequest, OrderRequest - bet input and the venue order it becomes."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from driftbet.errors import InvalidRequest

BetSide = Literal["YES", "NO"]
OrderDirection = Literal["LONG", "SHORT"]
OrderKind = Literal["market", "limit"]


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, bool):
        raise ValueError("expected a number")
    elif isinstance(value, (int, float, str)):
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"not a number: {value!r}") from e
    else:
        raise ValueError(f"not a number: {value!r}")
    if not d.is_finite():
        raise ValueError("must be finite")
    return d


class BetRequest(BaseModel):
    """A requested notional bet. Never persisted."""

    model_config = ConfigDict(frozen=True)

    market_index: int
    direction: BetSide
    amount: Decimal
    limit_price: Decimal | None = None

    @field_validator("direction", mode="before")
    @classmethod
    def _upper_direction(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("amount", mode="before")
    @classmethod
    def _positive_amount(cls, v: Any) -> Decimal:
        d = _as_decimal(v)
        if d <= 0:
            raise ValueError("amount must be positive")
        return d

    @field_validator("limit_price", mode="before")
    @classmethod
    def _probability(cls, v: Any) -> Decimal | None:
        if v is None:
            return None
        d = _as_decimal(v)
        if not (0 < d < 1):
            raise ValueError("limit price must be inside (0, 1)")
        return d

    @classmethod
    def create(
        cls,
        market_index: int,
        direction: str,
        amount: Any,
        limit_price: Any = None,
    ) -> BetRequest:
        """Validate inputs; any problem becomes InvalidRequest."""
        try:
            return cls(
                market_index=market_index,
                direction=direction,
                amount=amount,
                limit_price=limit_price,
            )
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidRequest(details) from e

    @property
    def order_direction(self) -> OrderDirection:
        return "LONG" if self.direction == "YES" else "SHORT"


class OrderRequest(BaseModel):
    """Venue-native order: sizes and prices already in fixed-point units."""

    model_config = ConfigDict(frozen=True)

    market_index: int
    direction: OrderDirection
    base_asset_amount: int = Field(..., gt=0)
    order_kind: OrderKind = "market"
    price: int | None = Field(None, gt=0)
