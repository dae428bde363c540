"""Unified entry point that dispatches calls to exchange adapters."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from .dex import ActionExtended, build_dex_order
from .errors import ConfigurationError
from .exchanges.base import BaseExchangeClient
from .exchanges.protocol import DepositAddress
from .markets import FileMarketProvider, MarketCache, MarketInfo, MarketProvider
from .platform import PlatformTag, detect_platform
from .precision import Number
from .settings import Settings

logger = logging.getLogger(__name__)

SUPPORTED_EXCHANGES = ("Binance", "Bitstamp", "Huobi", "WhaleEx")
DEX_EXCHANGES = ("WhaleEx",)


class TradeFacade:
    """One normalized interface over all configured exchanges."""

    def __init__(
        self,
        settings: Settings,
        market_provider: MarketProvider,
        clients: dict[str, BaseExchangeClient] | None = None,
    ):
        self.settings = settings
        self.markets = MarketCache(market_provider)
        self.clients = {name.lower(): client for name, client in (clients or {}).items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "TradeFacade":
        from .exchanges.init import create_exchange_clients_from_settings

        clients = create_exchange_clients_from_settings(settings)
        return cls(settings, FileMarketProvider(settings.markets_file), clients)

    async def init(self) -> None:
        """Run adapter start-up work, such as fetching the first WhaleEx id batch."""
        for name, client in self.clients.items():
            initialize = getattr(client, "initialize", None)
            if initialize is not None:
                await initialize()
                logger.info("Initialized %s", name)

    async def close(self) -> None:
        for client in self.clients.values():
            await client.close()

    def check_exchange_and_pair(self, exchange: str, pair: str) -> bool:
        if not exchange:
            raise ValueError("exchange is required")
        if exchange not in SUPPORTED_EXCHANGES:
            raise ValueError(f"Unknown exchange: {exchange}")
        if not pair or len(pair.split("_")) != 2:
            raise ValueError(f"Invalid pair: {pair!r}, expected BASE_QUOTE")
        if exchange in DEX_EXCHANGES and pair.split("_")[1] == "EOS":
            if not self.settings.eos.configured:
                raise ConfigurationError(f"{exchange} {pair} needs an EOS account and private key")
        return True

    def _client(self, exchange: str) -> BaseExchangeClient:
        client = self.clients.get(exchange.lower())
        if client is None:
            raise ConfigurationError(f"Exchange {exchange} is not configured")
        return client

    async def _market(self, exchange: str, pair: str) -> MarketInfo:
        self.check_exchange_and_pair(exchange, pair)
        return await self.markets.get_market(exchange, pair)

    async def create_order(
        self,
        exchange: str,
        pair: str,
        price: Number,
        quantity: Number,
        sell: bool,
    ) -> ActionExtended:
        """Build a DEX order without sending it.

        Args:
            exchange: DEX exchange name
            pair: Normalized pair, e.g. EIDOS_EOS
            price: Limit price
            quantity: Base quantity
            sell: True if sell, otherwise buy

        Returns:
            ActionExtended holding the transfer action and the order id
        """
        if exchange not in DEX_EXCHANGES:
            raise ValueError(f"{exchange} is not a DEX exchange")
        market = await self._market(exchange, pair)
        action, order_id = build_dex_order(self.settings.eos.account, market, price, quantity, sell)
        return ActionExtended(exchange, action, order_id)

    async def place_order(
        self,
        exchange: str,
        pair: str,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        """Place a limit order and return the exchange order id."""
        market = await self._market(exchange, pair)
        return await self._client(exchange).place_order(market, price, quantity, sell, client_order_id)

    async def cancel_order(self, exchange: str, pair: str, order_id: str) -> bool:
        if not order_id:
            raise ValueError("order_id is required")
        market = await self._market(exchange, pair)
        return await self._client(exchange).cancel_order(market, order_id)

    async def query_order(self, exchange: str, pair: str, order_id: str) -> dict[str, Any] | None:
        if not order_id:
            raise ValueError("order_id is required")
        market = await self._market(exchange, pair)
        return await self._client(exchange).query_order(market, order_id)

    async def query_balance(self, exchange: str, symbol: str) -> Decimal:
        return await self._client(exchange).query_balance(symbol)

    async def query_all_balances(self, exchange: str) -> dict[str, Decimal]:
        return await self._client(exchange).query_all_balances()

    async def get_deposit_addresses(
        self,
        exchange: str,
        symbols: list[str],
    ) -> dict[str, dict[str, DepositAddress]]:
        return await self._client(exchange).get_deposit_addresses(symbols)

    async def withdraw(
        self,
        exchange: str,
        symbol: str,
        address: str,
        amount: Number,
        memo: str | None = None,
        platform: PlatformTag | None = None,
    ) -> str:
        """Withdraw to an address, detecting the platform from its shape when not given."""
        if not address:
            raise ValueError("address is required")
        if platform is None:
            platform = detect_platform(address, symbol)
        logger.info("Withdrawing %s %s from %s to %s (platform %s)", amount, symbol, exchange, address, platform)
        return await self._client(exchange).withdraw(symbol, address, amount, memo, platform)
