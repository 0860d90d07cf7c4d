"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    directory = _find_config_dir(config_dir)
    default_path = directory / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = directory / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        venue: dict[str, Any] | None = None,
        markets: dict[str, Any] | None = None,
        paper: dict[str, Any] | None = None,
        trading: dict[str, Any] | None = None,
        journal: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.venue = venue or {}
        self.markets = markets or {}
        self.paper = paper or {}
        self.trading = trading or {}
        self.journal = journal or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            venue=raw.get("venue"),
            markets=raw.get("markets"),
            paper=raw.get("paper"),
            trading=raw.get("trading"),
            journal=raw.get("journal"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def venue_env(self) -> str:
        return self.venue.get("env", "mainnet-beta")

    @property
    def venue_mode(self) -> str:
        return self.venue.get("mode", "paper")

    @property
    def dlob_url(self) -> str:
        return self.venue.get("dlob_url", "https://dlob.drift.trade")

    @property
    def http_timeout_sec(self) -> float:
        return float(self.venue.get("http_timeout_sec", 10.0))

    @property
    def requests_per_sec(self) -> float:
        return float(self.venue.get("requests_per_sec", 10.0))

    @property
    def base_precision(self) -> int:
        return int(self.venue.get("base_precision", 10**9))

    @property
    def price_precision(self) -> int:
        return int(self.venue.get("price_precision", 10**6))

    @property
    def quote_precision(self) -> int:
        return int(self.venue.get("quote_precision", 10**6))

    @property
    def symbol_tokens(self) -> list[str]:
        return list(self.markets.get("symbol_tokens") or ["BET", "PREDICT"])

    @property
    def category_tag(self) -> str:
        return self.markets.get("category_tag", "Prediction")

    @property
    def catalog(self) -> list[dict[str, Any]]:
        return list(self.markets.get("catalog") or [])

    @property
    def paper_db_path(self) -> str:
        return self.paper.get("db_path", "data/driftbet.duckdb")

    @property
    def paper_account(self) -> str:
        return self.paper.get("account", "default")

    @property
    def paper_starting_collateral(self) -> float:
        return float(self.paper.get("starting_collateral", 1000.0))

    @property
    def trading_enabled(self) -> bool:
        return bool(self.trading.get("enabled", False))

    @property
    def max_bet_amount(self) -> float | None:
        value = self.trading.get("max_bet_amount", 100.0)
        return None if value in (None, 0) else float(value)

    @property
    def journal_db_path(self) -> str:
        return self.journal.get("db_path", self.paper_db_path)

    @property
    def journal_starting_balance(self) -> float:
        return float(self.journal.get("starting_balance", 10.0))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
