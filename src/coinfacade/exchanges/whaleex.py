"""WhaleEx exchange adapter (REST API)."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

from ..errors import ExchangeRejected
from ..id_store import ID_TTL_SECONDS, GlobalIdStore
from ..markets import MarketInfo
from ..precision import Number, convert_price_and_quantity
from ..signing import Credentials, QueryHmacSigner
from .base import BaseExchangeClient, ProxyConfig

logger = logging.getLogger(__name__)

HOST = "api.whaleex.com"
PATH_PREFIX = "/BUSINESS"
ID_BATCH_SIZE = 100


class WhaleExClient(BaseExchangeClient):
    """WhaleEx exchange client.

    Order ids are allocated by the exchange in batches; see GlobalIdStore.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        proxy: ProxyConfig | None = None,
        id_ttl: float = ID_TTL_SECONDS,
        **options: Any,
    ):
        super().__init__("WhaleEx", credentials, proxy=proxy, **options)
        self.signer = QueryHmacSigner(HOST)
        self.id_ttl = id_ttl
        self.id_store: GlobalIdStore | None = None
        self._init_lock = asyncio.Lock()

    def get_base_url(self) -> str:
        return f"https://{HOST}{PATH_PREFIX}"

    async def _call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        signed = self.signer.sign(self.credentials, method, f"{PATH_PREFIX}{path}", params=params)
        data = await self._request(
            method,
            f"{self.get_base_url()}{path}",
            params=signed.params,
            json=body,
        )
        if str(data.get("returnCode")) != "0":
            raise ExchangeRejected(
                f"WhaleEx {path} rejected: {data.get('message') or data}",
                code=data.get("returnCode"),
                payload=data,
            )
        return data.get("result")

    async def fetch_global_ids(self, remark: str = "0") -> tuple[str, list[str]]:
        result = await self._call(
            "GET",
            "/api/v1/order/globalIds",
            {"remark": remark, "size": ID_BATCH_SIZE},
        )
        logger.info("Fetched WhaleEx global ids (remark %s -> %s)", remark, result["remark"])
        return str(result["remark"]), [str(i) for i in result["list"]]

    async def initialize(self) -> GlobalIdStore:
        """Create the id pool with its first batch; safe to call repeatedly."""
        async with self._init_lock:
            if self.id_store is None:
                self.require_credentials()
                self.id_store = await GlobalIdStore.create(self.fetch_global_ids, ttl=self.id_ttl)
        return self.id_store

    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        price_str, quantity_str, _ = convert_price_and_quantity(market, price, quantity, sell)
        id_store = await self.initialize()

        order = {
            "orderId": client_order_id or await id_store.next_id(),
            "amount": quantity_str,
            "price": price_str,
            "symbol": market.raw_pair,
            "type": "sell-limit" if sell else "buy-limit",
        }
        result = await self._call("POST", "/api/v1/order/orders/place", body=order)
        return str(result)

    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        try:
            await self._call("POST", f"/api/v1/order/orders/{order_id}/submitcancel")
        except ExchangeRejected as e:
            logger.warning("WhaleEx cancel of %s rejected: %s", order_id, e.payload)
            return False
        return True

    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        try:
            return await self._call("GET", f"/api/v1/order/orders/{order_id}")
        except ExchangeRejected as e:
            logger.debug("WhaleEx order %s not found: %s", order_id, e.code)
            return None

    async def query_all_balances(self) -> dict[str, Decimal]:
        result = await self._call("GET", "/api/v1/assets")
        return {
            item["currency"]: Decimal(str(item["availableAmount"]))
            for item in result["list"]["content"]
        }

    async def query_balance(self, symbol: str) -> Decimal:
        result = await self._call("GET", f"/api/v1/asset/{symbol}")
        total = Decimal(str(result["total"]))
        frozen = Decimal(str(result["frozen"]))
        return total - frozen
