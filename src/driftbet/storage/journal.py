"""Paper-trading journal - hypothetical wagers with manually declared outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog

from driftbet.errors import JournalError
from driftbet.models import JournalPortfolio, JournalTrade

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)

_PORTFOLIO_COLUMNS = [
    "starting_balance",
    "current_balance",
    "total_trades",
    "wins",
    "losses",
    "pending",
    "total_pnl",
    "created_at",
    "last_updated",
]
_TRADE_COLUMNS = [
    "id",
    "timestamp",
    "market",
    "platform",
    "position",
    "amount",
    "odds",
    "potential_payout",
    "reasoning",
    "expires_at",
    "status",
    "outcome",
    "pnl",
]


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def potential_payout(position: str, amount: float, odds: float) -> float:
    """Payout if the wager wins: YES bought at `odds`, NO at `1 - odds`."""
    return amount / odds if position == "YES" else amount / (1 - odds)


def load_portfolio(conn: DuckDBPyConnection, starting_balance: float = 10.0) -> JournalPortfolio:
    """Return the journal portfolio, creating it with starting_balance on first use."""
    row = conn.execute(
        f"SELECT {', '.join(_PORTFOLIO_COLUMNS)} FROM journal_portfolio WHERE id = 1"
    ).fetchone()
    if row is None:
        now = _now()
        conn.execute(
            """
            INSERT INTO journal_portfolio (id, starting_balance, current_balance, total_trades, wins, losses, pending, total_pnl, created_at, last_updated)
            VALUES (1, ?, ?, 0, 0, 0, 0, 0, ?, ?)
            """,
            [starting_balance, starting_balance, now, now],
        )
        return JournalPortfolio(
            starting_balance=starting_balance,
            current_balance=starting_balance,
            created_at=now,
            last_updated=now,
        )
    return JournalPortfolio(**dict(zip(_PORTFOLIO_COLUMNS, row)))


def _save_portfolio(conn: DuckDBPyConnection, p: JournalPortfolio) -> None:
    conn.execute(
        """
        UPDATE journal_portfolio SET
            current_balance = ?, total_trades = ?, wins = ?, losses = ?, pending = ?,
            total_pnl = ?, last_updated = ?
        WHERE id = 1
        """,
        [p.current_balance, p.total_trades, p.wins, p.losses, p.pending, p.total_pnl, _now()],
    )


def get_trade(conn: DuckDBPyConnection, trade_id: int) -> JournalTrade | None:
    row = conn.execute(
        f"SELECT {', '.join(_TRADE_COLUMNS)} FROM journal_trades WHERE id = ?", [trade_id]
    ).fetchone()
    return JournalTrade(**dict(zip(_TRADE_COLUMNS, row))) if row else None


def list_trades(conn: DuckDBPyConnection, limit: int | None = None) -> list[JournalTrade]:
    """Trades oldest first; with limit, only the most recent `limit`."""
    rows = conn.execute(
        f"SELECT {', '.join(_TRADE_COLUMNS)} FROM journal_trades ORDER BY id"
    ).fetchall()
    trades = [JournalTrade(**dict(zip(_TRADE_COLUMNS, r))) for r in rows]
    return trades[-limit:] if limit else trades


def place_trade(
    conn: DuckDBPyConnection,
    market: str,
    platform: str,
    position: str,
    amount: float,
    odds: float,
    reasoning: str = "",
    expires_at: str | None = None,
    starting_balance: float = 10.0,
) -> JournalTrade:
    """Record a new PENDING wager and debit the journal balance."""
    position = position.upper()
    if position not in ("YES", "NO"):
        raise JournalError(f"position must be YES or NO, got {position!r}")
    if not 0 < odds < 1:
        raise JournalError(f"odds must be inside (0, 1), got {odds}")
    if amount <= 0:
        raise JournalError("amount must be positive")
    portfolio = load_portfolio(conn, starting_balance)
    if amount > portfolio.current_balance:
        raise JournalError(
            f"Insufficient balance. Have {portfolio.current_balance}, need {amount}"
        )
    next_id = conn.execute("SELECT COALESCE(MAX(id), 0) + 1 FROM journal_trades").fetchone()[0]
    trade = JournalTrade(
        id=next_id,
        timestamp=_now(),
        market=market,
        platform=platform,
        position=position,
        amount=amount,
        odds=odds,
        potential_payout=potential_payout(position, amount, odds),
        reasoning=reasoning,
        expires_at=expires_at,
    )
    conn.execute(
        f"INSERT INTO journal_trades ({', '.join(_TRADE_COLUMNS)}) VALUES ({', '.join('?' * len(_TRADE_COLUMNS))})",
        [getattr(trade, c) for c in _TRADE_COLUMNS],
    )
    portfolio.current_balance -= amount
    portfolio.total_trades += 1
    portfolio.pending += 1
    _save_portfolio(conn, portfolio)
    log.info("journal_trade_placed", trade_id=trade.id, market=market, position=position, amount=amount)
    return trade


def resolve_trade(conn: DuckDBPyConnection, trade_id: int, won: bool) -> JournalTrade:
    """Mark a PENDING trade WON or LOST and settle it against the journal balance."""
    trade = get_trade(conn, trade_id)
    if trade is None:
        raise JournalError(f"Trade #{trade_id} not found")
    if trade.status != "PENDING":
        raise JournalError(f"Trade #{trade_id} already resolved: {trade.status}")
    portfolio = load_portfolio(conn)
    if won:
        trade.status = "WON"
        trade.outcome = "CORRECT"
        trade.pnl = trade.potential_payout - trade.amount
        portfolio.current_balance += trade.potential_payout
        portfolio.wins += 1
    else:
        trade.status = "LOST"
        trade.outcome = "INCORRECT"
        trade.pnl = -trade.amount
        portfolio.losses += 1
    portfolio.pending -= 1
    portfolio.total_pnl += trade.pnl
    conn.execute(
        "UPDATE journal_trades SET status = ?, outcome = ?, pnl = ? WHERE id = ?",
        [trade.status, trade.outcome, trade.pnl, trade.id],
    )
    _save_portfolio(conn, portfolio)
    log.info("journal_trade_resolved", trade_id=trade.id, status=trade.status, pnl=trade.pnl)
    return trade
