"""Positions, P&L and bet sizing."""

from driftbet.trading.engine import OrderEngine

__all__ = ["OrderEngine"]
