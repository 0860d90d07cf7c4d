"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

SCHEMA_SQL = """
-- Sequences for auto-increment IDs
CREATE SEQUENCE IF NOT EXISTS order_seq START 1;

-- Paper venue account (collateral in quote precision units)
CREATE TABLE IF NOT EXISTS paper_accounts (
    account         VARCHAR PRIMARY KEY,
    collateral      BIGINT NOT NULL,
    created_at      BIGINT NOT NULL
);

-- Paper venue positions (base and quote precision units)
CREATE TABLE IF NOT EXISTS paper_positions (
    account             VARCHAR NOT NULL,
    market_index        INTEGER NOT NULL,
    base_asset_amount   BIGINT NOT NULL,
    quote_entry_amount  BIGINT NOT NULL,
    updated_at          BIGINT NOT NULL,
    PRIMARY KEY (account, market_index)
);

-- Paper venue order log (append-only)
CREATE TABLE IF NOT EXISTS paper_orders (
    id                  BIGINT PRIMARY KEY DEFAULT nextval('order_seq'),
    order_id            VARCHAR NOT NULL,
    account             VARCHAR NOT NULL,
    market_index        INTEGER NOT NULL,
    direction           VARCHAR NOT NULL,
    order_kind          VARCHAR NOT NULL,
    base_asset_amount   BIGINT NOT NULL,
    price               BIGINT,
    fill_price          BIGINT,
    status              VARCHAR NOT NULL,
    created_at          BIGINT NOT NULL
);

-- Paper-trading journal portfolio (single row)
CREATE TABLE IF NOT EXISTS journal_portfolio (
    id                  INTEGER PRIMARY KEY,
    starting_balance    DOUBLE NOT NULL,
    current_balance     DOUBLE NOT NULL,
    total_trades        INTEGER NOT NULL,
    wins                INTEGER NOT NULL,
    losses              INTEGER NOT NULL,
    pending             INTEGER NOT NULL,
    total_pnl           DOUBLE NOT NULL,
    created_at          TIMESTAMP NOT NULL,
    last_updated        TIMESTAMP NOT NULL
);

-- Paper-trading journal trades
CREATE TABLE IF NOT EXISTS journal_trades (
    id                  INTEGER PRIMARY KEY,
    timestamp           TIMESTAMP NOT NULL,
    market              VARCHAR NOT NULL,
    platform            VARCHAR NOT NULL,
    position            VARCHAR NOT NULL,
    amount              DOUBLE NOT NULL,
    odds                DOUBLE NOT NULL,
    potential_payout    DOUBLE NOT NULL,
    reasoning           VARCHAR,
    expires_at          VARCHAR,
    status              VARCHAR NOT NULL,
    outcome             VARCHAR,
    pnl                 DOUBLE
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager."""
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise
