"""Prediction market pricing."""

from driftbet.pricing.engine import PricingEngine, clamp_probability, compute_quote

__all__ = ["PricingEngine", "clamp_probability", "compute_quote"]
