"""Exchange adapters and connectivity layer."""

from .protocol import DepositAddress, ExchangeClient
from .base import BaseExchangeClient, ProxyConfig
from .factory import EXCHANGE_CLIENTS, create_exchange_client

__all__ = [
    "DepositAddress",
    "ExchangeClient",
    "BaseExchangeClient",
    "ProxyConfig",
    "EXCHANGE_CLIENTS",
    "create_exchange_client",
]
