"""Factory for creating exchange client instances."""

from __future__ import annotations

from typing import Any, Type

from ..signing import Credentials
from .base import BaseExchangeClient, ProxyConfig
from .binance import BinanceClient
from .bitstamp import BitstampClient
from .huobi import HuobiClient
from .whaleex import WhaleExClient


EXCHANGE_CLIENTS: dict[str, Type[BaseExchangeClient]] = {
    "binance": BinanceClient,
    "bitstamp": BitstampClient,
    "huobi": HuobiClient,
    "whaleex": WhaleExClient,
}


def create_exchange_client(
    exchange: str,
    api_key: str,
    api_secret: str,
    *,
    customer_id: int | None = None,
    proxy: dict[str, Any] | None = None,
    **options: Any,
) -> BaseExchangeClient:
    """Create an exchange client instance.

    Args:
        exchange: Exchange name (Binance, Bitstamp, Huobi, WhaleEx)
        api_key: API key
        api_secret: API secret
        customer_id: Numeric account id (required for Bitstamp)
        proxy: Proxy configuration (url, username, password)
        **options: Additional exchange-specific options

    Returns:
        Configured exchange client

    Raises:
        ValueError: If exchange is not supported
        ValueError: If required parameters are missing
    """
    exchange_lower = exchange.lower()

    if exchange_lower not in EXCHANGE_CLIENTS:
        supported = ", ".join(EXCHANGE_CLIENTS.keys())
        raise ValueError(
            f"Unsupported exchange: {exchange}. Supported exchanges: {supported}"
        )

    if not api_key or not api_secret:
        raise ValueError(f"{exchange} requires api_key and api_secret")

    if exchange_lower == "bitstamp" and not customer_id:
        raise ValueError(f"{exchange} requires customer_id parameter")

    client_class = EXCHANGE_CLIENTS[exchange_lower]

    proxy_config = None
    if proxy:
        proxy_config = ProxyConfig(
            url=proxy.get("url"),
            username=proxy.get("username"),
            password=proxy.get("password"),
        )

    credentials = Credentials(api_key, api_secret, customer_id)
    return client_class(credentials, proxy=proxy_config, **options)
