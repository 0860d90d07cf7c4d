"""Fixed-point conversions for sizing bets and marking positions.

All venue amounts are integers scaled by the session's VenuePrecision. Conversions go
through Decimal so that e.g. a $10 bet at a 0.40 oracle price is exactly 25 base units.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal

from driftbet.models.position import PositionLabel
from driftbet.venue.base import VenuePrecision


def price_to_units(price: Decimal, precision: VenuePrecision) -> int:
    """Probability/price -> price precision integer, rounded down."""
    return int((price * precision.price).to_integral_value(rounding=ROUND_FLOOR))


def base_units_for_notional(amount: Decimal, oracle_price: int, precision: VenuePrecision) -> int:
    """Base units bought by `amount` of quote currency at `oracle_price` (price precision).

    amount / (oracle_price / price_scale) * base_scale, floored.
    """
    if oracle_price <= 0:
        raise ValueError(f"oracle price must be positive, got {oracle_price}")
    scaled = amount * precision.price * precision.base / Decimal(oracle_price)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def unrealized_pnl(
    base_asset_amount: Decimal, mark_price: Decimal, quote_entry_amount: Decimal
) -> Decimal:
    """Signed P&L; quote entry is negative for longs and positive for shorts."""
    return base_asset_amount * mark_price + quote_entry_amount


def direction_label(base_asset_amount: int | Decimal) -> PositionLabel:
    if base_asset_amount > 0:
        return "YES"
    if base_asset_amount < 0:
        return "NO"
    return "NONE"
