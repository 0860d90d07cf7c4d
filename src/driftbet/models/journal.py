"""JournalTrade, JournalPortfolio - paper-trading journal records."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TradeStatus = Literal["PENDING", "WON", "LOST", "CANCELLED"]


class JournalTrade(BaseModel):
    """A hypothetical wager recorded in the journal."""

    id: int
    timestamp: datetime
    market: str
    platform: str
    position: Literal["YES", "NO"]
    amount: float = Field(..., gt=0)
    odds: float = Field(..., gt=0, lt=1, description="Implied probability at entry")
    potential_payout: float
    reasoning: str = ""
    expires_at: str | None = None
    status: TradeStatus = "PENDING"
    outcome: str | None = None
    pnl: float | None = None


class JournalPortfolio(BaseModel):
    """Running journal balance and win/loss tally."""

    starting_balance: float
    current_balance: float
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    pending: int = 0
    total_pnl: float = 0.0
    created_at: datetime
    last_updated: datetime

    @property
    def roi(self) -> float:
        if self.starting_balance <= 0:
            return 0.0
        return self.total_pnl / self.starting_balance

    @property
    def win_rate(self) -> float | None:
        decided = self.wins + self.losses
        return self.wins / decided if decided else None
