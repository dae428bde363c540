"""Bitstamp exchange adapter."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from urllib.parse import urlencode

from ..errors import ExchangeRejected
from ..markets import MarketInfo
from ..platform import PlatformTag
from ..precision import Number, convert_price_and_quantity, to_decimal
from ..signing import Credentials, HeaderHmacSigner, LegacyHmacSigner
from .base import BaseExchangeClient, ProxyConfig

logger = logging.getLogger(__name__)

DOMAIN = "www.bitstamp.net"


class BitstampClient(BaseExchangeClient):
    """Bitstamp exchange client.

    Most endpoints use the v2 header signature; order status still lives on
    the v1 API and is signed with the legacy body signature.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        proxy: ProxyConfig | None = None,
        **options: Any,
    ):
        super().__init__("Bitstamp", credentials, proxy=proxy, **options)
        self.signer = HeaderHmacSigner(DOMAIN)
        self.legacy_signer = LegacyHmacSigner()

    def get_base_url(self) -> str:
        return f"https://{DOMAIN}"

    async def _post_v2(self, path: str, payload: str) -> Any:
        signed = self.signer.sign(self.credentials, "POST", path, payload)
        data = await self._request(
            "POST",
            f"{self.get_base_url()}{path}",
            data=payload,
            headers=signed.headers,
        )
        if isinstance(data, dict) and data.get("status") == "error":
            raise ExchangeRejected(
                f"Bitstamp {path} rejected: {data.get('reason')}",
                code=data.get("code"),
                payload=data,
            )
        return data

    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        price_str, quantity_str, _ = convert_price_and_quantity(market, price, quantity, sell)

        path = f"/api/v2/{'sell' if sell else 'buy'}/{market.raw_pair}/"
        payload = f"price={price_str}&amount={quantity_str}"
        if client_order_id:
            payload += f"&client_order_id={client_order_id}"

        data = await self._post_v2(path, payload)
        return str(data["id"])

    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        path = "/api/order_status/"
        signed = self.legacy_signer.sign(self.credentials, "POST", path)
        payload = urlencode({"id": order_id, **signed.params})

        data = await self._request(
            "POST",
            f"{self.get_base_url()}{path}",
            data=payload,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if data.get("error"):
            logger.debug("Bitstamp order %s not found: %s", order_id, data["error"])
            return None
        return data

    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        data = await self._post_v2("/api/v2/cancel_order/", f"id={order_id}")
        return str(data.get("id")) == order_id

    async def query_all_balances(self) -> dict[str, Decimal]:
        data = await self._post_v2("/api/v2/balance/", "{}")
        return {
            key[: -len("_available")].upper(): Decimal(str(value))
            for key, value in data.items()
            if key.endswith("_available")
        }

    async def withdraw(
        self,
        symbol: str,
        address: str,
        amount: Number,
        memo: str | None = None,
        platform: PlatformTag | None = None,
    ) -> str:
        params = {"amount": f"{to_decimal(amount):f}", "address": address}
        if memo:
            params["memo_id"] = memo
        data = await self._post_v2(f"/api/v2/{symbol.lower()}_withdrawal/", urlencode(params))
        return str(data["id"])
