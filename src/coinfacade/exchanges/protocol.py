"""Protocol definition for exchange clients."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol

from ..markets import MarketInfo
from ..platform import PlatformTag
from ..precision import Number


class DepositAddress:
    """A deposit address for one asset on one platform."""

    def __init__(self, symbol: str, address: str, memo: str | None = None, platform: str | None = None):
        self.symbol = symbol
        self.address = address
        self.memo = memo
        self.platform = platform

    def __repr__(self) -> str:
        return f"DepositAddress({self.symbol!r}, {self.address!r}, memo={self.memo!r}, platform={self.platform!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DepositAddress):
            return NotImplemented
        return (self.symbol, self.address, self.memo, self.platform) == (
            other.symbol,
            other.address,
            other.memo,
            other.platform,
        )


class ExchangeClient(Protocol):
    """Protocol for exchange connectivity."""

    name: str

    async def place_order(
        self,
        market: MarketInfo,
        price: Number,
        quantity: Number,
        sell: bool,
        client_order_id: str | None = None,
    ) -> str:
        """Place a limit order.

        Args:
            market: Market metadata for the pair
            price: Limit price
            quantity: Base quantity
            sell: True for a sell order
            client_order_id: Optional client-side identifier

        Returns:
            Exchange order id
        """
        ...

    async def cancel_order(self, market: MarketInfo, order_id: str) -> bool:
        """Cancel an order. Returns True if the exchange confirmed it."""
        ...

    async def query_order(self, market: MarketInfo, order_id: str) -> dict[str, Any] | None:
        """Fetch raw order information, or None if the order is unknown."""
        ...

    async def query_balance(self, symbol: str) -> Decimal:
        """Fetch the available balance of one asset."""
        ...

    async def query_all_balances(self) -> dict[str, Decimal]:
        """Fetch available balances of all assets."""
        ...

    async def get_deposit_addresses(self, symbols: list[str]) -> dict[str, dict[str, DepositAddress]]:
        """Fetch deposit addresses keyed by symbol, then by platform."""
        ...

    async def withdraw(
        self,
        symbol: str,
        address: str,
        amount: Number,
        memo: str | None = None,
        platform: PlatformTag | None = None,
    ) -> str:
        """Request a withdrawal and return the exchange's withdrawal id."""
        ...

    async def close(self) -> None:
        """Close the HTTP session."""
        ...
