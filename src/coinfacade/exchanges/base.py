"""Base client class for exchange adapters."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

import aiohttp

from ..errors import ConfigurationError, TransportFailure
from ..markets import MarketInfo
from ..platform import PlatformTag, detect_platform
from ..precision import Number
from ..signing import Credentials
from .protocol import DepositAddress

logger = logging.getLogger(__name__)


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class BaseExchangeClient(ABC):
    """Base class for all exchange adapters."""

    def __init__(
        self,
        name: str,
        credentials: Credentials,
        *,
        proxy: ProxyConfig | None = None,
        timeout: float = 30.0,
        **options: Any,
    ):
        """Initialize exchange client.

        Args:
            name: Exchange name as used by the facade (e.g. 'Binance')
            credentials: API key, secret and optional customer id
            proxy: Proxy configuration
            timeout: Total request timeout in seconds
            **options: Additional exchange-specific options
        """
        self.name = name
        self.credentials = credentials
        self.proxy = proxy or ProxyConfig()
        self.timeout = timeout
        self.options = options
        self.session: aiohttp.ClientSession | None = None

    def get_base_url(self) -> str:
        """Get base API URL."""
        return "https://api.example.com"

    def require_credentials(self) -> None:
        if not self.credentials.api_key or not self.credentials.api_secret:
            raise ConfigurationError(f"{self.name} API key and secret are required")

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self.session

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: Any = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            TransportFailure: On network errors, timeouts, a non-2xx status
                or a body that is not JSON
        """
        session = await self._ensure_session()
        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                json=json,
                headers=headers,
                proxy=self.proxy.proxy_url,
            ) as resp:
                if resp.status < 200 or resp.status >= 300:
                    body = await resp.text()
                    raise TransportFailure(
                        f"{self.name} {method} {url} failed: {resp.status}",
                        status=resp.status,
                        payload=body,
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    body = await resp.text()
                    raise TransportFailure(
                        f"{self.name} {method} {url} returned a non-JSON body",
                        status=resp.status,
                        payload=body,
                    ) from e
        except aiohttp.ClientError as e:
            logger.error("%s %s %s network error: %s", self.name, method, url, e)
            raise TransportFailure(f"{self.name} {method} {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("%s %s %s timed out after %ss", self.name, method, url, self.timeout)
            raise TransportFailure(f"{self.name} {method} {url} timed out after {self.timeout}s") from e

    @abstractmethod
    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        """Place a limit order."""
        ...

    @abstractmethod
    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        """Cancel an order."""
        ...

    @abstractmethod
    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        """Query an order."""
        ...

    @abstractmethod
    async def query_all_balances(self) -> dict[str, Decimal]:
        """Fetch available balances."""
        ...

    async def query_balance(self, symbol: str) -> Decimal:
        """Fetch one available balance.

        Default implementation filters query_all_balances.
        """
        balances = await self.query_all_balances()
        return balances.get(symbol.upper(), Decimal(0))

    @staticmethod
    def platform_key(address: str, symbol: str) -> str:
        """Key a deposit address by its detected platform, or by the symbol itself."""
        platform = detect_platform(address, symbol)
        return platform.value if platform else symbol

    async def get_deposit_addresses(self, symbols: list[str]) -> dict[str, dict[str, DepositAddress]]:
        raise NotImplementedError(f"{self.name} does not support deposit address lookup")

    async def withdraw(
        self,
        symbol: str,
        address: str,
        amount: Number,
        memo: str | None = None,
        platform: PlatformTag | None = None,
    ) -> str:
        raise NotImplementedError(f"{self.name} does not support withdrawals")

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
