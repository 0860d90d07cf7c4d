"""Bet command: place a YES/NO bet on a BET market."""

from __future__ import annotations

import asyncio

import typer

from driftbet.errors import DriftBetError
from driftbet.pricing import PricingEngine
from driftbet.trading import OrderEngine
from driftbet.venue import create_session


async def submit_bet(settings, market_index: int, direction: str, amount: float, limit: float | None) -> str:
    async with create_session(settings) as session:
        pricing = PricingEngine(session, settings.symbol_tokens, settings.category_tag)
        engine = OrderEngine(session, pricing, max_bet_amount=settings.max_bet_amount)
        return await engine.place_bet(market_index, direction, amount, limit)


def bet(
    ctx: typer.Context,
    market_index: int = typer.Argument(..., help="Perp market index of the BET market"),
    direction: str = typer.Argument(..., help="YES or NO"),
    amount: float = typer.Argument(..., help="Amount in USDC to bet"),
    limit: float | None = typer.Argument(None, help="Optional limit price in (0, 1)"),
    trade: bool = typer.Option(False, "--trade", help="Enable trading for this invocation"),
) -> None:
    """Place a bet (e.g. "bet 45 YES 10" or "bet 45 NO 5 0.35")."""
    settings = ctx.obj["settings"]
    if not (trade or settings.trading_enabled):
        typer.echo("Trading is disabled. Pass --trade (or set trading.enabled) to place bets.")
        raise typer.Exit(1)
    typer.echo(f"Placing BET: market {market_index} {direction.upper()} ${amount}")
    if limit is not None:
        typer.echo(f"   Limit Price: ${limit}")
    try:
        order_id = asyncio.run(submit_bet(settings, market_index, direction, amount, limit))
    except DriftBetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"BET placed! Order: {order_id}")
