"""driftbet - pricing, positions and bet sizing for Drift BET prediction markets."""

__version__ = "0.1.0"
