"""Drift DLOB REST client - read-only market data (best bid/ask and oracle) for perp markets."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from driftbet.errors import MarketUnavailable, VenueTransportError
from driftbet.models import BookSnapshot, MarketDescriptor
from driftbet.venue.base import MarketDataSource, VenuePrecision
from driftbet.venue.rate_limit import TokenBucket

log = structlog.get_logger(__name__)

DLOB_URL = "https://dlob.drift.trade"


def parse_catalog(rows: list[dict[str, Any]]) -> list[MarketDescriptor]:
    """Convert config catalog rows to MarketDescriptors, keeping order. Bad rows are skipped."""
    markets: list[MarketDescriptor] = []
    for row in rows:
        try:
            markets.append(
                MarketDescriptor(
                    market_index=int(row["market_index"]),
                    symbol=str(row["symbol"]),
                    full_name=str(row.get("full_name") or row["symbol"]),
                    category=tuple(row.get("category") or ()),
                )
            )
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            log.warning("skip_catalog_entry", row=row, error=str(e))
    return markets


def _level_price(levels: Any) -> int | None:
    """Price of the first level of a DLOB side, or None when the side is empty."""
    if not levels:
        return None
    return int(levels[0]["price"])


def _oracle_price(payload: dict[str, Any]) -> int | None:
    oracle_data = payload.get("oracleData")
    if isinstance(oracle_data, dict) and oracle_data.get("price") is not None:
        return int(oracle_data["price"])
    if payload.get("oracle") is not None:
        return int(payload["oracle"])
    return None


class DlobMarketData(MarketDataSource):
    """Market data from the DLOB server's L2 endpoint. Catalog is supplied by configuration."""

    venue_id = "drift"

    def __init__(
        self,
        catalog: list[MarketDescriptor],
        base_url: str = DLOB_URL,
        precision: VenuePrecision | None = None,
        timeout: float = 10.0,
        requests_per_sec: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.catalog = list(catalog)
        self.base_url = base_url.rstrip("/")
        self.precision = precision or VenuePrecision()
        self.timeout = timeout
        self._bucket = TokenBucket(rate=requests_per_sec)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> DlobMarketData:
        return cls(
            catalog=parse_catalog(settings.catalog),
            base_url=settings.dlob_url,
            precision=VenuePrecision.from_settings(settings),
            timeout=settings.http_timeout_sec,
            requests_per_sec=settings.requests_per_sec,
            **kwargs,
        )

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            )
            log.info("dlob_connected", url=self.base_url, markets=len(self.catalog))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_market_catalog(self) -> list[MarketDescriptor]:
        return list(self.catalog)

    async def _fetch_l2(self, market_index: int) -> dict[str, Any]:
        if self._client is None:
            raise VenueTransportError("DLOB client is not connected")
        if not any(m.market_index == market_index for m in self.catalog):
            raise MarketUnavailable(market_index, "not in catalog")
        await self._bucket.acquire()
        params = {
            "marketIndex": market_index,
            "marketType": "perp",
            "depth": 1,
            "includeOracle": "true",
        }
        try:
            resp = await self._client.get("/l2", params=params)
        except httpx.TransportError as e:
            raise VenueTransportError(f"DLOB request failed: {e}") from e
        if resp.status_code >= 500:
            raise VenueTransportError(f"DLOB server error {resp.status_code}")
        if resp.status_code >= 400:
            raise MarketUnavailable(market_index, f"HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise MarketUnavailable(market_index, "undecodable response") from e
        if not isinstance(data, dict):
            raise MarketUnavailable(market_index, "unexpected response shape")
        return data

    async def get_order_book_snapshot(self, market_index: int) -> BookSnapshot:
        data = await self._fetch_l2(market_index)
        try:
            bid = _level_price(data.get("bids"))
            ask = _level_price(data.get("asks"))
        except (KeyError, TypeError, ValueError) as e:
            raise MarketUnavailable(market_index, f"bad book level: {e}") from e
        return BookSnapshot(market_index=market_index, best_bid=bid, best_ask=ask)

    async def get_oracle_price(self, market_index: int) -> int:
        data = await self._fetch_l2(market_index)
        try:
            price = _oracle_price(data)
        except (TypeError, ValueError) as e:
            raise MarketUnavailable(market_index, f"bad oracle price: {e}") from e
        if price is None:
            raise MarketUnavailable(market_index, "no oracle price")
        return price
