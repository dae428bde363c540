"""Decimal formatting and order-field validation shared by all adapters."""

from __future__ import annotations

import logging
from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Union

from .errors import BelowMinimum, ConfigurationError, PrecisionMismatch
from .markets import MarketInfo

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]


class RoundMode(Enum):
    """Final rounding step applied by format_decimal."""

    FLOOR = "floor"
    CEIL = "ceil"


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal, going through the shortest repr for floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        if isinstance(value, float):
            return Decimal(repr(value))
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def format_decimal(value: Number, precision: int, round_mode: RoundMode = RoundMode.FLOOR) -> str:
    """Render value with exactly `precision` fractional digits.

    The value is first scaled with one extra digit and truncated, so float noise
    past that digit cannot push the final CEIL/FLOOR decision over a boundary.

    Examples:
        >>> format_decimal(1.005, 2, RoundMode.CEIL)
        '1.01'
        >>> format_decimal(1.004, 2, RoundMode.FLOOR)
        '1.00'
        >>> format_decimal(7.9, 0, RoundMode.FLOOR)
        '7'
    """
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")

    number = to_decimal(value)
    if not number.is_finite():
        raise ValueError(f"Cannot format non-finite value: {value!r}")

    rounding = ROUND_CEILING if round_mode is RoundMode.CEIL else ROUND_FLOOR
    with localcontext() as ctx:
        ctx.prec = max(60, len(number.as_tuple().digits) + precision + 10)
        truncated = number.scaleb(precision + 1).to_integral_value(rounding=ROUND_DOWN)
        restored = (truncated / 10).to_integral_value(rounding=rounding)
        if restored == 0:
            restored = Decimal(0)
        return f"{restored.scaleb(-precision):.{precision}f}"


def calc_precision(number_str: str) -> int:
    """Count digits after the decimal point."""
    if "." not in number_str:
        return 0
    return len(number_str) - number_str.index(".") - 1


def validate_order_fields(
    market: MarketInfo,
    price: str,
    quantity: str,
    quote_quantity: str,
) -> bool:
    """Check formatted order fields against the market's precision and size floors.

    Raises:
        PrecisionMismatch: A field has the wrong number of decimals
        ConfigurationError: The market declares no minimum size at all
        BelowMinimum: Quote volume is at or under min_quote_quantity, or
            base quantity is strictly under min_base_quantity
    """
    for field, text, expected in (
        ("price_precision", price, market.price_precision),
        ("base_precision", quantity, market.base_precision),
        ("quote_precision", quote_quantity, market.quote_precision),
    ):
        actual = calc_precision(text)
        if actual != expected:
            raise PrecisionMismatch(market.exchange, market.normalized_pair, field, expected, actual)

    if not market.min_base_quantity and not market.min_quote_quantity:
        raise ConfigurationError(
            f"{market.exchange} {market.normalized_pair} declares neither "
            "min_base_quantity nor min_quote_quantity"
        )

    if market.min_quote_quantity and Decimal(quote_quantity) <= market.min_quote_quantity:
        raise BelowMinimum("quote", quote_quantity, market.min_quote_quantity, market.quote_currency)

    if market.min_base_quantity and Decimal(quantity) < market.min_base_quantity:
        raise BelowMinimum("base", quantity, market.min_base_quantity, market.base_currency)

    return True


def convert_price_and_quantity(
    market: MarketInfo,
    price: Number,
    quantity: Number,
    sell: bool,
) -> tuple[str, str, str]:
    """Produce validated (price, quantity, quote_quantity) strings for an order.

    Buys round price up and sells round it down; quantity is always floored;
    the quote quantity follows the price direction.
    """
    price_mode = RoundMode.FLOOR if sell else RoundMode.CEIL

    price_str = format_decimal(price, market.price_precision, price_mode)
    quantity_str = format_decimal(quantity, market.base_precision, RoundMode.FLOOR)
    quote_quantity_str = format_decimal(
        Decimal(price_str) * Decimal(quantity_str),
        market.quote_precision,
        price_mode,
    )

    validate_order_fields(market, price_str, quantity_str, quote_quantity_str)
    logger.debug(
        "%s %s %s price=%s quantity=%s quote=%s",
        market.exchange,
        market.normalized_pair,
        "sell" if sell else "buy",
        price_str,
        quantity_str,
        quote_quantity_str,
    )
    return price_str, quantity_str, quote_quantity_str
