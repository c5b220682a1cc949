"""
Conversions between limits and prices.

A limit is a shifted log-price index with step ``BASE``: the sqrt price at an
unshifted limit ``n`` is ``BASE ** (n / 2)``. Limits are shifted by
``offset(width)`` so that the usable domain ``[0, max_limit(width)]`` is
non-negative.
"""

from decimal import Decimal, ROUND_DOWN, ROUND_FLOOR, ROUND_UP
from typing import Optional

from ..core.errors import DomainError
from .context import ArithmeticContext, Rounding, resolve_context, to_decimal

# Protocol constants
BASE = Decimal("1.00001")
OFFSET = 7906625
MAX_LIMIT = 7906625


def _positive(value, name: str) -> Decimal:
    result = to_decimal(value, name)
    if result <= 0:
        raise DomainError(f"{name} must be positive, got {result}")
    return result


def offset(width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Offset that centres the limit domain, as a multiple of width."""
    with resolve_context(ctx).scope():
        w = _positive(width, "width")
        return (Decimal(OFFSET) / w).to_integral_value(rounding=ROUND_FLOOR) * w


def shift_limit(limit, width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        return to_decimal(limit, "limit") + offset(width, ctx)


def unshift_limit(limit, width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        return to_decimal(limit, "limit") - offset(width, ctx)


def max_limit(width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Largest valid shifted limit for a width."""
    with resolve_context(ctx).scope():
        w = _positive(width, "width")
        span = (Decimal(MAX_LIMIT) / w).to_integral_value(rounding=ROUND_FLOOR) * w
        return offset(w, ctx) + span


def is_valid_limit(limit, width, ctx: Optional[ArithmeticContext] = None) -> bool:
    """Check a shifted limit lies in the domain and on the width grid."""
    with resolve_context(ctx).scope():
        value = to_decimal(limit, "limit")
        w = _positive(width, "width")
        if value < 0 or value > max_limit(w, ctx):
            return False
        return (value - offset(w, ctx)) % w == 0


def limit_to_sqrt_price(limit, width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Sqrt price at a shifted limit."""
    with resolve_context(ctx).scope():
        unshifted = unshift_limit(limit, width, ctx)
        return BASE ** (unshifted / 2)


def limit_to_price(limit, width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        sqrt_price = limit_to_sqrt_price(limit, width, ctx)
        return sqrt_price * sqrt_price


def sqrt_price_to_limit(sqrt_price, width, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Shifted limit at a sqrt price, truncating the raw limit toward zero."""
    with resolve_context(ctx).scope():
        value = _positive(sqrt_price, "sqrt_price")
        raw = (2 * value.ln() / BASE.ln()).to_integral_value(rounding=ROUND_DOWN)
        return shift_limit(raw, width, ctx)


def price_to_limit(
    price,
    width,
    round_up: bool = False,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Shifted limit at a price.

    Rounds away from zero when ``round_up`` is set, toward zero otherwise.
    """
    rounding = Rounding.AWAY_FROM_ZERO if round_up else Rounding.TOWARD_ZERO
    scoped = resolve_context(ctx).with_rounding(rounding)
    with scoped.scope():
        value = _positive(price, "price")
        raw = value.ln() / BASE.ln()
        shifted = shift_limit(raw, width, scoped)
        # Round after shifting, otherwise the direction flips for negative raw limits.
        return shifted.to_integral_value(rounding=ROUND_UP if round_up else ROUND_DOWN)
