"""Huobi exchange adapter."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from ..errors import ConfigurationError, ExchangeRejected
from ..markets import MarketInfo
from ..platform import PlatformTag
from ..precision import Number, convert_price_and_quantity, to_decimal
from ..signing import Credentials, QueryHmacSigner
from .base import BaseExchangeClient, ProxyConfig
from .protocol import DepositAddress

logger = logging.getLogger(__name__)

HOST = "api.huobi.pro"

# Huobi names USDT chains explicitly; other assets use their default chain
USDT_CHAINS = {
    PlatformTag.ERC20: "usdterc20",
    PlatformTag.TRC20: "trc20usdt",
    PlatformTag.OMNI: "usdt",
}


class HuobiClient(BaseExchangeClient):
    """Huobi exchange client."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        proxy: ProxyConfig | None = None,
        account_id: int | None = None,
        **options: Any,
    ):
        super().__init__("Huobi", credentials, proxy=proxy, **options)
        self.account_id = account_id
        self.signer = QueryHmacSigner(HOST)

    def get_base_url(self) -> str:
        return f"https://{HOST}"

    async def _call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        signed = self.signer.sign(self.credentials, method, path, params=params)
        data = await self._request(
            method,
            f"{self.get_base_url()}{path}",
            params=signed.params,
            json=body,
        )
        # v1 endpoints report status, v2 endpoints report code
        if data.get("status", "ok") != "ok" or data.get("code", 200) != 200:
            raise ExchangeRejected(
                f"Huobi {path} rejected: {data.get('err-msg') or data.get('message')}",
                code=data.get("err-code") or data.get("code"),
                payload=data,
            )
        return data.get("data")

    async def ensure_account_id(self) -> int:
        """Resolve the spot account id once."""
        if self.account_id is None:
            accounts = await self._call("GET", "/v1/account/accounts")
            spot = [a for a in accounts or [] if a.get("type") == "spot"]
            if not spot:
                raise ConfigurationError("Huobi returned no spot account")
            self.account_id = spot[0]["id"]
            logger.info("Using Huobi spot account %s", self.account_id)
        return self.account_id

    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        price_str, quantity_str, _ = convert_price_and_quantity(market, price, quantity, sell)
        account_id = await self.ensure_account_id()

        body = {
            "account-id": str(account_id),
            "symbol": market.raw_pair,
            "type": "sell-limit" if sell else "buy-limit",
            "amount": quantity_str,
            "price": price_str,
        }
        if client_order_id:
            body["client-order-id"] = client_order_id

        order_id = await self._call("POST", "/v1/order/orders/place", body=body)
        return str(order_id)

    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        try:
            data = await self._call("POST", f"/v1/order/orders/{order_id}/submitcancel")
        except ExchangeRejected as e:
            logger.warning("Huobi cancel of %s rejected: %s", order_id, e)
            return False
        return str(data) == order_id

    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        try:
            return await self._call("GET", f"/v1/order/orders/{order_id}")
        except ExchangeRejected as e:
            logger.debug("Huobi order %s not found: %s", order_id, e.code)
            return None

    async def query_all_balances(self) -> dict[str, Decimal]:
        account_id = await self.ensure_account_id()
        data = await self._call("GET", f"/v1/account/accounts/{account_id}/balance")

        result: dict[str, Decimal] = {}
        for item in data.get("list", []):
            if item.get("type") != "trade":
                continue
            currency = item["currency"].upper()
            result[currency] = result.get(currency, Decimal(0)) + Decimal(str(item.get("balance", "0")))
        return result

    async def get_deposit_addresses(self, symbols: list[str]) -> dict[str, dict[str, DepositAddress]]:
        result: dict[str, dict[str, DepositAddress]] = {}
        for symbol in symbols:
            entries = await self._call("GET", "/v2/account/deposit/address", {"currency": symbol.lower()})
            for entry in entries or []:
                key = self.platform_key(entry["address"], symbol)
                result.setdefault(symbol, {})[key] = DepositAddress(
                    symbol,
                    entry["address"],
                    memo=entry.get("addressTag") or None,
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
        body: dict[str, Any] = {
            "address": address,
            "amount": f"{to_decimal(amount):f}",
            "currency": symbol.lower(),
        }
        if memo:
            body["addr-tag"] = memo
        if symbol == "USDT" and platform in USDT_CHAINS:
            body["chain"] = USDT_CHAINS[platform]

        withdrawal_id = await self._call("POST", "/v1/dw/withdraw/api/create", body=body)
        return str(withdrawal_id)
