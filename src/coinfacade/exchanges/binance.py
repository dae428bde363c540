"""Binance exchange adapter."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from decimal import Decimal
from typing import Any
from urllib.parse import urlencode

from ..markets import MarketInfo
from ..platform import PlatformTag
from ..precision import Number, convert_price_and_quantity, to_decimal
from ..signing import Credentials
from .base import BaseExchangeClient, ProxyConfig
from .protocol import DepositAddress

logger = logging.getLogger(__name__)

NETWORKS = {
    PlatformTag.BTC: "BTC",
    PlatformTag.OMNI: "OMNI",
    PlatformTag.ERC20: "ETH",
    PlatformTag.TRC20: "TRX",
    PlatformTag.EOS: "EOS",
    PlatformTag.BEP2: "BNB",
}


class BinanceClient(BaseExchangeClient):
    """Binance exchange client."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        proxy: ProxyConfig | None = None,
        recv_window_ms: int = 5000,
        **options: Any,
    ):
        super().__init__("Binance", credentials, proxy=proxy, recv_window_ms=recv_window_ms, **options)
        self.recv_window_ms = recv_window_ms

    def get_base_url(self) -> str:
        return "https://api.binance.com"

    def _get_headers(self) -> dict[str, str]:
        return {
            "X-MBX-APIKEY": self.credentials.api_key,
            "User-Agent": "coinfacade/1.0",
        }

    def _signed_url(self, path: str, params: dict[str, Any]) -> str:
        """Append timestamp, recvWindow and signature to the query string."""
        self.require_credentials()
        params = dict(params)
        params["timestamp"] = int(time.time() * 1000)
        params["recvWindow"] = self.recv_window_ms

        query_string = urlencode(params)
        signature = hmac.new(
            self.credentials.api_secret.encode(),
            query_string.encode(),
            hashlib.sha256,
        ).hexdigest()
        return f"{self.get_base_url()}{path}?{query_string}&signature={signature}"

    async def _signed(self, method: str, path: str, params: dict[str, Any]) -> Any:
        url = self._signed_url(path, params)
        return await self._request(method, url, headers=self._get_headers())

    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        """Place a GTC limit order."""
        price_str, quantity_str, _ = convert_price_and_quantity(market, price, quantity, sell)

        params: dict[str, Any] = {
            "symbol": market.raw_pair,
            "side": "SELL" if sell else "BUY",
            "type": "LIMIT",
            "timeInForce": "GTC",
            "quantity": quantity_str,
            "price": price_str,
        }
        if client_order_id:
            params["newClientOrderId"] = client_order_id

        data = await self._signed("POST", "/api/v3/order", params)
        order_id = str(data["orderId"])
        logger.info("Binance order %s placed on %s", order_id, market.raw_pair)
        return order_id

    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        data = await self._signed(
            "DELETE",
            "/api/v3/order",
            {"symbol": market.raw_pair, "orderId": int(order_id)},
        )
        return str(data.get("orderId")) == order_id

    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        data = await self._signed(
            "GET",
            "/api/v3/order",
            {"symbol": market.raw_pair, "orderId": int(order_id)},
        )
        return data or None

    async def query_all_balances(self) -> dict[str, Decimal]:
        data = await self._signed("GET", "/api/v3/account", {})
        return {b["asset"]: Decimal(b["free"]) for b in data.get("balances", [])}

    async def get_deposit_addresses(self, symbols: list[str]) -> dict[str, dict[str, DepositAddress]]:
        result: dict[str, dict[str, DepositAddress]] = {}
        for symbol in symbols:
            data = await self._signed("GET", "/sapi/v1/capital/deposit/address", {"coin": symbol})
            if not data or data.get("coin") != symbol or not data.get("address"):
                continue

            address = data["address"]
            key = self.platform_key(address, symbol)
            result.setdefault(symbol, {})[key] = DepositAddress(
                symbol,
                address,
                memo=data.get("tag") or None,
                platform=key,
            )
        return result

    async def withdraw(
        self,
        symbol: str,
        address: str,
        amount: Number,
        memo: str | None = None,
        platform: PlatformTag | None = None,
    ) -> str:
        params: dict[str, Any] = {
            "coin": symbol,
            "address": address,
            "amount": f"{to_decimal(amount):f}",
        }
        if memo:
            params["addressTag"] = memo
        if platform is not None:
            params["network"] = NETWORKS[platform]

        data = await self._signed("POST", "/sapi/v1/capital/withdraw/apply", params)
        logger.info("Binance withdrawal %s of %s %s requested", data.get("id"), params["amount"], symbol)
        return str(data["id"])
