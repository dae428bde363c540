"""Encode limit orders for the WhaleEx contract on EOS as token transfers."""

from __future__ import annotations

import logging
import math
import random
import re
import time
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR

from .eos import (
    EOS_QUANTITY_PRECISION,
    EOS_SYMBOL,
    EOS_TOKEN_CONTRACT,
    ChainAction,
    send_eos_action,
    send_token_action,
)
from .errors import ConfigurationError, UnsupportedMarketShape
from .markets import MarketInfo
from .precision import Number, RoundMode, format_decimal, to_decimal

logger = logging.getLogger(__name__)

WHALEEX_TRUST_ACCOUNT = "whaleextrust"
WHALEEX_BROKER = "whaleexchang"
MAKER_FEE_TIER = "10"
TAKER_FEE_TIER = "10"
DESTINATION_TAG = "coinrace.com:"


@dataclass(slots=True)
class ActionExtended:
    exchange: str
    action: ChainAction
    order_id: str | None = None


def create_order_id(now: float | None = None, rand: float | None = None) -> str:
    """Build a time-prefixed order id, grouped in 12-digit chunks for the memo parser."""
    now = time.time() if now is None else now
    rand = random.random() if rand is None else rand
    order_id = str(math.floor(now) * 65536 + math.floor(rand * 65535))
    return " ".join(re.findall(r".{1,12}", order_id))


def _check_market(market: MarketInfo) -> None:
    if market.quote_contract != EOS_TOKEN_CONTRACT:
        raise UnsupportedMarketShape(
            f"{market.exchange} {market.normalized_pair} quote contract must be "
            f"{EOS_TOKEN_CONTRACT}, got {market.quote_contract}"
        )
    if not market.normalized_pair.endswith(f"_{EOS_SYMBOL}"):
        raise UnsupportedMarketShape(f"{market.normalized_pair} is not quoted in {EOS_SYMBOL}")
    if market.quote_precision != EOS_QUANTITY_PRECISION:
        raise UnsupportedMarketShape(
            f"{market.normalized_pair} quote_precision must be {EOS_QUANTITY_PRECISION}, "
            f"got {market.quote_precision}"
        )
    if not market.base_contract:
        raise UnsupportedMarketShape(f"{market.normalized_pair} has no base_contract")


def build_dex_order(
    account: str,
    market: MarketInfo,
    price: Number,
    quantity: Number,
    sell: bool,
    *,
    now: float | None = None,
    rand: float | None = None,
) -> tuple[ChainAction, str]:
    """Build the transfer action that places a limit order on WhaleEx.

    Exactly one leg moves up front: the base token for a sell, EOS for a buy.
    The contract settles the other leg.

    Args:
        account: EOS account placing the order
        market: An EOS-quoted market with base_contract set
        price: Limit price in EOS
        quantity: Base quantity
        sell: True to sell the base token
        now: Unix time override
        rand: Random fraction override for the order id

    Returns:
        Tuple of (transfer action, order id)
    """
    if not account:
        raise ConfigurationError("EOS account is required to build a DEX order")
    _check_market(market)

    now = time.time() if now is None else now
    order_id = create_order_id(now, rand)

    price_dec = to_decimal(price)
    quantity_dec = to_decimal(quantity)

    base_amount = quantity_dec.scaleb(market.base_precision).to_integral_value(rounding=ROUND_FLOOR)
    quote_quantity = format_decimal(price_dec * quantity_dec, market.quote_precision, RoundMode.CEIL)
    quote_amount = to_decimal(quote_quantity).scaleb(market.quote_precision).to_integral_value(
        rounding=ROUND_CEILING
    )

    memo = (
        f"order:{account} | {'sell' if sell else 'buy'} | limit | {market.base_contract} | "
        f"{market.base_currency} | {base_amount:f} | {EOS_TOKEN_CONTRACT} | {EOS_SYMBOL} | "
        f"{quote_amount:f} | {MAKER_FEE_TIER} | {TAKER_FEE_TIER} | {WHALEEX_BROKER} | "
        f"{order_id} | {math.floor(now)} | | {price_dec:f} | {DESTINATION_TAG}"
    )

    if sell:
        base_quantity = format_decimal(quantity_dec, market.base_precision, RoundMode.FLOOR)
        action = send_token_action(
            account,
            WHALEEX_TRUST_ACCOUNT,
            market.base_currency,
            market.base_contract,
            base_quantity,
            memo,
        )
    else:
        action = send_eos_action(account, WHALEEX_TRUST_ACCOUNT, quote_quantity, memo)

    logger.info("Built WhaleEx %s order %s for %s", "sell" if sell else "buy", order_id, account)
    return action, order_id
