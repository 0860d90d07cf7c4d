"""Journal subcommand: place, resolve, status for paper wagers."""

from __future__ import annotations

import typer

from driftbet.errors import JournalError
from driftbet.storage.db import get_connection, init_schema
from driftbet.storage.journal import list_trades, load_portfolio, place_trade, resolve_trade

app = typer.Typer(help="Paper-trading journal (no real money)")


@app.command("place")
def place(
    ctx: typer.Context,
    market: str = typer.Argument(..., help="Market name/description"),
    position: str = typer.Argument(..., help="YES or NO"),
    amount: float = typer.Argument(..., help="Amount to wager"),
    odds: float = typer.Argument(..., help="Implied probability at entry (0-1)"),
    platform: str = typer.Option("drift-bet", "--platform", help="Platform name"),
    reasoning: str = typer.Option("", "--reasoning", "-r", help="Why this trade"),
    expires_at: str | None = typer.Option(None, "--expires", help="When the market resolves"),
) -> None:
    """Record a new paper wager."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.journal_db_path)
    init_schema(conn)
    try:
        trade = place_trade(
            conn,
            market=market,
            platform=platform,
            position=position,
            amount=amount,
            odds=odds,
            reasoning=reasoning,
            expires_at=expires_at,
            starting_balance=settings.journal_starting_balance,
        )
        portfolio = load_portfolio(conn)
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()
    typer.echo(f"Trade #{trade.id} placed!")
    typer.echo(f"   Market: {trade.market}")
    typer.echo(f"   Position: {trade.position} @ {trade.odds * 100:.1f}%")
    typer.echo(f"   Amount: {trade.amount}")
    typer.echo(f"   Potential Payout: {trade.potential_payout:.3f}")
    typer.echo(f"   Balance: {portfolio.current_balance:.3f}")


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    trade_id: int = typer.Argument(..., help="Trade number"),
    outcome: str = typer.Argument(..., help="won or lost"),
) -> None:
    """Record the outcome of a pending wager."""
    if outcome.lower() not in ("won", "lost"):
        typer.echo("Outcome must be 'won' or 'lost'", err=True)
        raise typer.Exit(1)
    settings = ctx.obj["settings"]
    conn = get_connection(settings.journal_db_path)
    init_schema(conn)
    try:
        trade = resolve_trade(conn, trade_id, won=outcome.lower() == "won")
        portfolio = load_portfolio(conn)
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()
    typer.echo(f"Trade #{trade.id} resolved: {trade.status}")
    typer.echo(f"   P&L: {trade.pnl:+.3f}")
    typer.echo(f"   Balance: {portfolio.current_balance:.3f}")


@app.command("status")
def status(
    ctx: typer.Context,
    recent: int = typer.Option(5, "--recent", "-n", help="Number of recent trades to show"),
) -> None:
    """Show journal portfolio summary and recent trades."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.journal_db_path)
    init_schema(conn)
    try:
        p = load_portfolio(conn, settings.journal_starting_balance)
        trades = list_trades(conn, limit=recent)
    finally:
        conn.close()
    typer.echo("Paper Trading Portfolio")
    typer.echo("=" * 40)
    typer.echo(f"Starting Balance:  {p.starting_balance}")
    typer.echo(f"Current Balance:   {p.current_balance:.3f}")
    typer.echo(f"Total P&L:         {p.total_pnl:+.3f}")
    typer.echo(f"ROI:               {p.roi * 100:.1f}%")
    typer.echo("-" * 40)
    typer.echo(f"Total Trades:      {p.total_trades}")
    typer.echo(f"Wins:              {p.wins}")
    typer.echo(f"Losses:            {p.losses}")
    typer.echo(f"Pending:           {p.pending}")
    if p.win_rate is not None:
        typer.echo(f"Win Rate:          {p.win_rate * 100:.1f}%")
    typer.echo("=" * 40)
    if trades:
        typer.echo("Recent Trades:")
        for t in trades:
            typer.echo(f"  #{t.id} | {t.market}")
            typer.echo(f"     {t.position} @ {t.odds * 100:.1f}% | {t.amount} | {t.status}")
            if t.pnl is not None:
                typer.echo(f"     P&L: {t.pnl:+.3f}")
