"""Paper venue - live market data, simulated account and fills persisted to DuckDB."""

from __future__ import annotations

import uuid
from decimal import Decimal
from pathlib import Path

import structlog

from driftbet.errors import AccountNotFound, OrderRejected, VenueTransportError
from driftbet.models import BookSnapshot, MarketDescriptor, OrderRequest, RawPosition
from driftbet.storage.db import get_connection, init_schema
from driftbet.storage.ledger import (
    apply_fill,
    ensure_account,
    get_collateral,
    get_position,
    list_positions,
    record_order,
)
from driftbet.venue.base import MarketDataSource, VenueSession

log = structlog.get_logger(__name__)


def _opened_size(current: int, delta: int) -> int:
    """Base units by which a fill increases exposure (flips count the whole new side)."""
    new = current + delta
    if current == 0 or (current > 0) == (new > 0):
        return max(0, abs(new) - abs(current))
    return abs(new)


class PaperVenue(VenueSession):
    """Simulated account on top of a real market data source.

    Market orders fill at the oracle price. Limit orders fill at their limit price when
    marketable against the oracle, otherwise they rest as open and are never matched later.
    """

    venue_id = "paper"

    def __init__(
        self,
        market_data: MarketDataSource,
        db_path: str | Path,
        account: str = "default",
        starting_collateral: float = 1000.0,
    ):
        self.market_data = market_data
        self.precision = market_data.precision
        self.db_path = Path(db_path)
        self.account = account
        self.starting_collateral = starting_collateral
        self._conn = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None and self.market_data.is_connected

    async def connect(self) -> None:
        await self.market_data.connect()
        if self._conn is None:
            conn = None
            try:
                conn = get_connection(self.db_path)
                init_schema(conn)
                collateral = int(Decimal(str(self.starting_collateral)) * self.precision.quote)
                ensure_account(conn, self.account, collateral)
            except Exception:
                if conn is not None:
                    conn.close()
                await self.market_data.close()
                raise
            self._conn = conn
            log.info("paper_venue_connected", db_path=str(self.db_path), account=self.account)

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        await self.market_data.close()

    def _get_conn(self):
        if self._conn is None:
            raise VenueTransportError("paper venue is not connected")
        return self._conn

    async def get_market_catalog(self) -> list[MarketDescriptor]:
        return await self.market_data.get_market_catalog()

    async def get_order_book_snapshot(self, market_index: int) -> BookSnapshot:
        return await self.market_data.get_order_book_snapshot(market_index)

    async def get_oracle_price(self, market_index: int) -> int:
        return await self.market_data.get_oracle_price(market_index)

    async def get_user_position(self, market_index: int) -> RawPosition | None:
        conn = self._get_conn()
        if get_collateral(conn, self.account) is None:
            raise AccountNotFound(f"no paper account '{self.account}'")
        return get_position(conn, self.account, market_index)

    def _log_order(self, order_id: str, order: OrderRequest, fill_price: int | None, status: str) -> None:
        record_order(
            self._get_conn(),
            order_id=order_id,
            account=self.account,
            market_index=order.market_index,
            direction=order.direction,
            order_kind=order.order_kind,
            base_asset_amount=order.base_asset_amount,
            price=order.price,
            fill_price=fill_price,
            status=status,
        )

    def free_collateral(self) -> int:
        """Collateral not committed to open positions, in quote units."""
        conn = self._get_conn()
        collateral = get_collateral(conn, self.account)
        if collateral is None:
            raise AccountNotFound(f"no paper account '{self.account}'")
        committed = sum(abs(p.quote_entry_amount) for p in list_positions(conn, self.account))
        return collateral - committed

    async def submit_order(self, order: OrderRequest) -> str:
        conn = self._get_conn()
        if get_collateral(conn, self.account) is None:
            raise AccountNotFound(f"no paper account '{self.account}'")
        oracle = await self.market_data.get_oracle_price(order.market_index)
        order_id = f"paper-{uuid.uuid4().hex[:16]}"
        signed = order.base_asset_amount if order.direction == "LONG" else -order.base_asset_amount

        fill_price: int | None
        if order.order_kind == "market":
            fill_price = oracle
        elif order.price is None:
            raise OrderRejected("limit order without price")
        elif (order.direction == "LONG" and order.price >= oracle) or (
            order.direction == "SHORT" and order.price <= oracle
        ):
            fill_price = order.price
        else:
            fill_price = None

        if fill_price is None:
            self._log_order(order_id, order, None, "open")
            log.info("paper_order_open", order_id=order_id, market_index=order.market_index)
            return order_id

        current = get_position(conn, self.account, order.market_index)
        opened = _opened_size(current.base_asset_amount if current else 0, signed)
        required = self.precision.notional(opened, fill_price)
        available = self.free_collateral()
        if required > available:
            self._log_order(order_id, order, None, "rejected")
            raise OrderRejected(
                f"insufficient collateral: need {required / self.precision.quote:.2f}, "
                f"have {available / self.precision.quote:.2f}"
            )

        conn.begin()
        try:
            apply_fill(
                conn,
                self.account,
                order.market_index,
                signed,
                -self.precision.notional(signed, fill_price),
            )
            self._log_order(order_id, order, fill_price, "filled")
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        log.info(
            "paper_order_filled",
            order_id=order_id,
            market_index=order.market_index,
            direction=order.direction,
            base_asset_amount=order.base_asset_amount,
            fill_price=fill_price,
        )
        return order_id
