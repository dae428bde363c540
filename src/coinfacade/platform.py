"""Detect which blockchain a withdrawal address belongs to."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping

import base58
from eth_utils import is_address

logger = logging.getLogger(__name__)


class PlatformTag(str, Enum):
    BTC = "BTC"
    OMNI = "OMNI"
    ERC20 = "ERC20"
    TRC20 = "TRC20"
    EOS = "EOS"
    BEP2 = "BEP2"


def detect_platform_from_address(address: str) -> PlatformTag | None:
    """Classify an address by its shape alone."""
    if address.startswith("bc1"):
        return PlatformTag.BTC

    try:
        decoded = base58.b58decode(address)
    except ValueError:
        decoded = b""
    if len(decoded) == 25:
        if decoded[0] in (0x00, 0x05):
            return PlatformTag.OMNI
        if decoded[0] == 0x41:
            return PlatformTag.TRC20

    if is_address(address):
        return PlatformTag.ERC20

    if len(address) == 12:
        # TODO: confirm the account exists on chain before tagging it EOS
        return PlatformTag.EOS

    if address.startswith("bnb"):
        return PlatformTag.BEP2

    return None


def detect_platform(address: str, symbol: str) -> PlatformTag | None:
    """Detect the platform to request for a withdrawal of `symbol`.

    Returns None when the address shape already implies the symbol's default
    network, so no platform needs to be passed to the exchange.
    """
    platform = detect_platform_from_address(address)

    if platform is PlatformTag.OMNI and symbol != "USDT":
        return None
    if platform is PlatformTag.ERC20 and symbol in ("ETH", "ETC"):
        return None
    if platform is PlatformTag.TRC20 and symbol == "TRX":
        return None
    if platform is PlatformTag.EOS and symbol == "EOS":
        return None
    if platform is PlatformTag.BEP2 and symbol == "BNB":
        return None

    if platform is not None and platform.value == symbol:
        return None

    logger.debug("Detected platform %s for %s address %s", platform, symbol, address)
    return platform


def calc_token_platform(deposit_addresses: Mapping[str, Mapping[str, object]]) -> dict[str, str]:
    """Map each symbol that has exactly one deposit platform to that platform."""
    result: dict[str, str] = {}
    for symbol, by_platform in deposit_addresses.items():
        platforms = list(by_platform.keys())
        if len(platforms) == 1:
            result[symbol] = platforms[0]
    return result
