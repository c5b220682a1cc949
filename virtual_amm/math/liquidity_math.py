"""
Liquidity mathematics over a sqrt price interval.

Quote amounts scale with the sqrt price span, base amounts with the span of
its reciprocal.
"""

from decimal import Decimal
from typing import Optional

from ..core.errors import DomainError
from ..core.interfaces import TokenAmounts
from .context import ArithmeticContext, resolve_context, to_decimal


def _interval(lower_sqrt_price, upper_sqrt_price):
    lower = to_decimal(lower_sqrt_price, "lower_sqrt_price")
    upper = to_decimal(upper_sqrt_price, "upper_sqrt_price")
    return lower, upper


def add_delta(liquidity, delta, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Apply a signed liquidity delta.

    Raises:
        DomainError: If the resulting liquidity would be negative
    """
    with resolve_context(ctx).scope():
        result = to_decimal(liquidity, "liquidity") + to_decimal(delta, "delta")
        if result < 0:
            raise DomainError(f"Liquidity cannot go negative: {liquidity} + {delta}")
        return result


def liquidity_to_quote(
    lower_sqrt_price,
    upper_sqrt_price,
    liquidity_delta,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    with resolve_context(ctx).scope():
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)
        return to_decimal(liquidity_delta, "liquidity_delta") * (upper - lower)


def liquidity_to_base(
    lower_sqrt_price,
    upper_sqrt_price,
    liquidity_delta,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    with resolve_context(ctx).scope():
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)
        if lower <= 0 or upper <= 0:
            raise DomainError("sqrt prices must be positive")
        return to_decimal(liquidity_delta, "liquidity_delta") * (upper - lower) / (upper * lower)


def quote_to_liquidity(
    lower_sqrt_price,
    upper_sqrt_price,
    quote_amount,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    with resolve_context(ctx).scope():
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)
        if upper == lower:
            raise DomainError("Cannot derive liquidity from a zero-width interval")
        return to_decimal(quote_amount, "quote_amount") / (upper - lower)


def base_to_liquidity(
    lower_sqrt_price,
    upper_sqrt_price,
    base_amount,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    with resolve_context(ctx).scope():
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)
        if upper == lower:
            raise DomainError("Cannot derive liquidity from a zero-width interval")
        return to_decimal(base_amount, "base_amount") * (upper * lower) / (upper - lower)


def liquidity_to_amounts(
    liquidity_delta,
    curr_sqrt_price,
    lower_sqrt_price,
    upper_sqrt_price,
    ctx: Optional[ArithmeticContext] = None
) -> TokenAmounts:
    """Split a liquidity delta into base and quote amounts at the current price.

    Below the current price the range holds only quote, above it only base;
    a range straddling the price splits at ``curr_sqrt_price``.
    """
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_sqrt_price, "curr_sqrt_price")
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)

        if upper <= curr:
            return TokenAmounts(
                base_amount=Decimal(0),
                quote_amount=liquidity_to_quote(lower, upper, liquidity_delta, ctx)
            )
        elif lower <= curr:
            return TokenAmounts(
                base_amount=liquidity_to_base(curr, upper, liquidity_delta, ctx),
                quote_amount=liquidity_to_quote(lower, curr, liquidity_delta, ctx)
            )
        else:
            return TokenAmounts(
                base_amount=liquidity_to_base(lower, upper, liquidity_delta, ctx),
                quote_amount=Decimal(0)
            )


def amounts_to_liquidity(
    base_amount,
    quote_amount,
    curr_sqrt_price,
    lower_sqrt_price,
    upper_sqrt_price,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Largest liquidity the given amounts can back at the current price."""
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_sqrt_price, "curr_sqrt_price")
        lower, upper = _interval(lower_sqrt_price, upper_sqrt_price)

        if upper <= curr:
            # Price above range, only quote is active
            return quote_to_liquidity(lower, upper, quote_amount, ctx)
        elif lower < curr:
            # Price within range, both tokens active
            from_base = base_to_liquidity(curr, upper, base_amount, ctx)
            from_quote = quote_to_liquidity(lower, curr, quote_amount, ctx)
            return min(from_base, from_quote)
        else:
            # Price below range, only base is active
            return base_to_liquidity(lower, upper, base_amount, ctx)
