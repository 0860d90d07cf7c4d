"""Positions command: open BET positions and unrealized P&L."""

from __future__ import annotations

import asyncio

import typer

from driftbet.errors import DriftBetError
from driftbet.models import Position
from driftbet.pricing import PricingEngine
from driftbet.trading import OrderEngine
from driftbet.venue import create_session


def print_positions(positions: list[Position]) -> None:
    typer.echo("Your BET Positions")
    typer.echo("=" * 60)
    if not positions:
        typer.echo("No open BET positions.")
        return
    total = 0
    for p in positions:
        typer.echo(f"[{p.market_index}] {p.symbol}")
        typer.echo(f"   Direction: {p.direction}")
        typer.echo(f"   Size: {abs(p.base_asset_amount):.4f}")
        typer.echo(f"   Entry Value: ${abs(p.quote_entry_amount):.2f}")
        typer.echo(f"   Mark: ${p.mark_price:.4f}")
        typer.echo(f"   Unrealized P&L: ${p.unrealized_pnl:.2f}")
        typer.echo("")
        total += p.unrealized_pnl
    typer.echo(f"Total Unrealized P&L: ${total:.2f}")


async def fetch_positions(settings) -> list[Position]:
    async with create_session(settings) as session:
        pricing = PricingEngine(session, settings.symbol_tokens, settings.category_tag)
        return await OrderEngine(session, pricing).get_positions()


def positions(ctx: typer.Context) -> None:
    """Show your open BET positions and P&L."""
    settings = ctx.obj["settings"]
    try:
        result = asyncio.run(fetch_positions(settings))
    except DriftBetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    print_positions(result)
