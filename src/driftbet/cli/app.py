"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from driftbet.config import get_settings
from driftbet.config.settings import configure_logging

app = typer.Typer(
    name="driftbet",
    help="driftbet - Drift BET prediction markets: odds, positions, bets and a paper journal.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from driftbet.cli import bet, journal, markets, positions  # noqa: E402

app.command("markets")(markets.markets)
app.command("positions")(positions.positions)
app.command("bet")(bet.bet)
app.add_typer(journal.app, name="journal")


@app.command("all")
def show_all(ctx: typer.Context) -> None:
    """Show markets and positions."""
    markets.markets(ctx, as_json=False)
    positions.positions(ctx)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
