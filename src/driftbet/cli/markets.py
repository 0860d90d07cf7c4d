"""Markets command: list BET markets with implied YES/NO probabilities."""

from __future__ import annotations

import asyncio
import json

import typer

from driftbet.errors import DriftBetError
from driftbet.models import MarketListing
from driftbet.pricing import PricingEngine
from driftbet.venue import create_session


def _price(value) -> str:
    return f"${value:.4f}" if value >= 0 else "N/A"


def print_listings(listings: list[MarketListing]) -> None:
    typer.echo("BET (Prediction) Markets")
    typer.echo("=" * 80)
    if not listings:
        typer.echo("No BET markets found.")
        return
    for item in listings:
        m, q = item.descriptor, item.quote
        status = "LIVE" if q.available else "N/A "
        pct = f"{q.yes_price * 100:.1f}%" if q.available else "N/A"
        typer.echo(f"{status} [{m.market_index}] {m.display_name}")
        typer.echo(f"   Symbol: {m.symbol}")
        typer.echo(f"   YES: {_price(q.yes_price)} ({pct} implied probability)")
        typer.echo(f"   NO:  {_price(q.no_price)}")
        typer.echo(f"   Bid: {_price(q.bid_price)} | Ask: {_price(q.ask_price)}")
        typer.echo(f"   Categories: {', '.join(m.category)}")
        typer.echo("")
    typer.echo(f"Total BET markets: {len(listings)}")


async def fetch_listings(settings) -> list[MarketListing]:
    async with create_session(settings) as session:
        pricing = PricingEngine(session, settings.symbol_tokens, settings.category_tag)
        return await pricing.list_prediction_markets()


def markets(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print listings as JSON"),
) -> None:
    """List all BET prediction markets with odds."""
    settings = ctx.obj["settings"]
    try:
        listings = asyncio.run(fetch_listings(settings))
    except DriftBetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if as_json:
        typer.echo(json.dumps([item.model_dump(mode="json") for item in listings], indent=2))
    else:
        print_listings(listings)
