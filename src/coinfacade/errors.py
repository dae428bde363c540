"""Exception hierarchy for order execution."""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class CoinFacadeError(Exception):
    """Base class for all facade errors."""


class ConfigurationError(CoinFacadeError):
    """Raised when credentials or market metadata are missing or invalid."""


class PrecisionMismatch(CoinFacadeError):
    """Raised when a formatted number does not match the market precision."""

    def __init__(self, exchange: str, pair: str, field: str, expected: int, actual: int):
        self.exchange = exchange
        self.pair = pair
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{exchange} {pair} {field} doesn't match: expected {expected} decimals, got {actual}"
        )


class BelowMinimum(CoinFacadeError):
    """Raised when an order is smaller than the exchange floor."""

    def __init__(self, side: str, value: str, minimum: Decimal, asset: str):
        self.side = side
        self.value = value
        self.minimum = minimum
        self.asset = asset
        if side == "quote":
            message = f"The order volume {value} is less than min_quote_quantity {minimum} {asset}"
        else:
            message = f"The base quantity {value} is less than min_base_quantity {minimum} {asset}"
        super().__init__(message)


class UnsupportedMarketShape(CoinFacadeError):
    """Raised when a DEX order is requested on a market it cannot encode."""


class TransportFailure(CoinFacadeError):
    """Raised on network errors, non-2xx responses or exchange-level error codes."""

    def __init__(self, message: str, status: int | None = None, payload: Any = None):
        self.status = status
        self.payload = payload
        super().__init__(message)


class ExchangeRejected(TransportFailure):
    """Raised when the exchange answers but reports failure in its own status field."""

    def __init__(self, message: str, code: Any = None, payload: Any = None):
        self.code = code
        super().__init__(message, payload=payload)
