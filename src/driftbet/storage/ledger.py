"""Paper venue persistence: account collateral, positions and the order log."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from driftbet.models import RawPosition

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def _now_ms() -> int:
    return int(time.time() * 1000)


def ensure_account(conn: DuckDBPyConnection, account: str, collateral: int) -> None:
    """Create the account with the given collateral if it does not exist yet."""
    conn.execute(
        """
        INSERT INTO paper_accounts (account, collateral, created_at)
        VALUES (?, ?, ?)
        ON CONFLICT (account) DO NOTHING
        """,
        [account, collateral, _now_ms()],
    )


def get_collateral(conn: DuckDBPyConnection, account: str) -> int | None:
    """Account collateral in quote units, or None if the account does not exist."""
    row = conn.execute(
        "SELECT collateral FROM paper_accounts WHERE account = ?", [account]
    ).fetchone()
    return int(row[0]) if row else None


def get_position(conn: DuckDBPyConnection, account: str, market_index: int) -> RawPosition | None:
    row = conn.execute(
        """
        SELECT base_asset_amount, quote_entry_amount FROM paper_positions
        WHERE account = ? AND market_index = ?
        """,
        [account, market_index],
    ).fetchone()
    if row is None:
        return None
    return RawPosition(
        market_index=market_index,
        base_asset_amount=int(row[0]),
        quote_entry_amount=int(row[1]),
    )


def list_positions(conn: DuckDBPyConnection, account: str) -> list[RawPosition]:
    """Open (non-zero) positions ordered by market index."""
    rows = conn.execute(
        """
        SELECT market_index, base_asset_amount, quote_entry_amount FROM paper_positions
        WHERE account = ? AND base_asset_amount <> 0
        ORDER BY market_index
        """,
        [account],
    ).fetchall()
    return [
        RawPosition(market_index=r[0], base_asset_amount=int(r[1]), quote_entry_amount=int(r[2]))
        for r in rows
    ]


def apply_fill(
    conn: DuckDBPyConnection,
    account: str,
    market_index: int,
    base_delta: int,
    quote_delta: int,
) -> RawPosition:
    """Apply a fill to the position. A position returning to zero realizes its quote entry into collateral."""
    current = get_position(conn, account, market_index) or RawPosition(market_index=market_index)
    base = current.base_asset_amount + base_delta
    quote_entry = current.quote_entry_amount + quote_delta
    if base == 0 and quote_entry != 0:
        conn.execute(
            "UPDATE paper_accounts SET collateral = collateral + ? WHERE account = ?",
            [quote_entry, account],
        )
        quote_entry = 0
    conn.execute(
        """
        INSERT INTO paper_positions (account, market_index, base_asset_amount, quote_entry_amount, updated_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT (account, market_index) DO UPDATE SET
            base_asset_amount = excluded.base_asset_amount,
            quote_entry_amount = excluded.quote_entry_amount,
            updated_at = excluded.updated_at
        """,
        [account, market_index, base, quote_entry, _now_ms()],
    )
    return RawPosition(
        market_index=market_index, base_asset_amount=base, quote_entry_amount=quote_entry
    )


def record_order(
    conn: DuckDBPyConnection,
    order_id: str,
    account: str,
    market_index: int,
    direction: str,
    order_kind: str,
    base_asset_amount: int,
    price: int | None,
    fill_price: int | None,
    status: str,
) -> None:
    """Append one row to the order log."""
    conn.execute(
        """
        INSERT INTO paper_orders (order_id, account, market_index, direction, order_kind, base_asset_amount, price, fill_price, status, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            order_id,
            account,
            market_index,
            direction,
            order_kind,
            base_asset_amount,
            price,
            fill_price,
            status,
            _now_ms(),
        ],
    )


def list_orders(conn: DuckDBPyConnection, account: str) -> list[dict[str, Any]]:
    """Order log for an account, oldest first."""
    rows = conn.execute(
        """
        SELECT order_id, market_index, direction, order_kind, base_asset_amount, price, fill_price, status, created_at
        FROM paper_orders WHERE account = ? ORDER BY id
        """,
        [account],
    ).fetchall()
    columns = [
        "order_id",
        "market_index",
        "direction",
        "order_kind",
        "base_asset_amount",
        "price",
        "fill_price",
        "status",
        "created_at",
    ]
    return [dict(zip(columns, r)) for r in rows]
