"""
Shared spread helpers: inventory skew, range delta and virtual positions.
"""

import logging
from decimal import Decimal, ROUND_DOWN
from typing import Optional

from ..core.errors import DomainError
from ..core.interfaces import VirtualPosition
from ..math.context import ArithmeticContext, resolve_context, to_decimal
from ..math.liquidity_math import base_to_liquidity, quote_to_liquidity
from ..math.price_math import limit_to_sqrt_price

logger = logging.getLogger(__name__)

SKEW_QUANTUM = Decimal("0.0001")


def get_skew(
    base_reserves,
    quote_reserves,
    price,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Normalised inventory imbalance in [-1, 1], truncated to 4 places.

    Positive when the quote reserves are worth more than the base reserves.
    """
    with resolve_context(ctx).scope():
        base = to_decimal(base_reserves, "base_reserves")
        quote = to_decimal(quote_reserves, "quote_reserves")
        price_dec = to_decimal(price, "price")
        if base < 0 or quote < 0:
            raise DomainError("Reserves cannot be negative")
        if price_dec <= 0:
            raise DomainError(f"price must be positive, got {price_dec}")

        base_in_quote = base * price_dec
        total = quote + base_in_quote
        if total == 0:
            return Decimal(0)
        skew = (quote - base_in_quote) / total
        return skew.quantize(SKEW_QUANTUM, rounding=ROUND_DOWN)


def get_delta(
    max_delta,
    base_reserves,
    quote_reserves,
    price,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Limit shift applied to both sides of the quote, truncated to an integer."""
    with resolve_context(ctx).scope():
        skew = get_skew(base_reserves, quote_reserves, price, ctx)
        delta = to_decimal(max_delta, "max_delta") * skew
        return delta.to_integral_value(rounding=ROUND_DOWN)


def get_virtual_position(
    is_bid: bool,
    lower_limit,
    upper_limit,
    amount,
    ctx: Optional[ArithmeticContext] = None
) -> VirtualPosition:
    """Place reserves over a limit range at width 1.

    Bids are funded with quote, asks with base. Zeroed or inverted ranges
    give a position with no liquidity.
    """
    with resolve_context(ctx).scope():
        lower = to_decimal(lower_limit, "lower_limit")
        upper = to_decimal(upper_limit, "upper_limit")
        lower_sqrt_price = limit_to_sqrt_price(lower, 1, ctx)
        upper_sqrt_price = limit_to_sqrt_price(upper, 1, ctx)

        if lower >= upper:
            logger.debug(f"Degenerate range [{lower}, {upper}], no liquidity placed")
            return VirtualPosition(lower_sqrt_price, upper_sqrt_price, Decimal(0))

        if is_bid:
            liquidity = quote_to_liquidity(lower_sqrt_price, upper_sqrt_price, amount, ctx)
        else:
            liquidity = base_to_liquidity(lower_sqrt_price, upper_sqrt_price, amount, ctx)
        return VirtualPosition(lower_sqrt_price, upper_sqrt_price, liquidity)
