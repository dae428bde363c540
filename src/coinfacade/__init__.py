"""coinfacade: one order-execution interface over many crypto exchanges."""

from .settings import Settings
from .errors import (
    BelowMinimum,
    CoinFacadeError,
    ConfigurationError,
    ExchangeRejected,
    PrecisionMismatch,
    TransportFailure,
    UnsupportedMarketShape,
)
from .markets import MarketInfo
from .precision import RoundMode, format_decimal, validate_order_fields, convert_price_and_quantity
from .signing import SignatureScheme, Credentials, sign
from .platform import PlatformTag, detect_platform
from .dex import build_dex_order
from .facade import TradeFacade, SUPPORTED_EXCHANGES

__all__ = [
    "Settings",
    "CoinFacadeError",
    "ConfigurationError",
    "ExchangeRejected",
    "PrecisionMismatch",
    "BelowMinimum",
    "UnsupportedMarketShape",
    "TransportFailure",
    "MarketInfo",
    "RoundMode",
    "format_decimal",
    "validate_order_fields",
    "convert_price_and_quantity",
    "SignatureScheme",
    "Credentials",
    "sign",
    "PlatformTag",
    "detect_platform",
    "build_dex_order",
    "TradeFacade",
    "SUPPORTED_EXCHANGES",
]
