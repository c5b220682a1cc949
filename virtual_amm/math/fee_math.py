"""Fee conversions between gross and net amounts."""

from decimal import Decimal
from typing import Optional, Tuple

from ..core.errors import InvalidRate
from .context import ArithmeticContext, resolve_context, to_decimal

BPS_DENOMINATOR = Decimal(10000)


def check_fee_rate(fee_rate) -> Decimal:
    """Validate a fee rate lies in [0, 1).

    Raises:
        InvalidRate: If the rate is negative or at least one
    """
    rate = to_decimal(fee_rate, "fee_rate")
    if rate < 0 or rate >= 1:
        raise InvalidRate(f"Fee rate must be in [0, 1), got {rate}")
    return rate


def fee_rate_from_bps(bps, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Convert a fee expressed in basis points to a rate."""
    with resolve_context(ctx).scope():
        return check_fee_rate(to_decimal(bps, "fee_rate_bps") / BPS_DENOMINATOR)


def calc_fee(gross_amount, fee_rate, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        rate = check_fee_rate(fee_rate)
        return to_decimal(gross_amount, "gross_amount") * rate


def net_to_fee(net_amount, fee_rate, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    """Fee owed on top of a net amount."""
    with resolve_context(ctx).scope():
        rate = check_fee_rate(fee_rate)
        return to_decimal(net_amount, "net_amount") * rate / (1 - rate)


def net_to_gross(net_amount, fee_rate, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        rate = check_fee_rate(fee_rate)
        return to_decimal(net_amount, "net_amount") / (1 - rate)


def gross_to_net(gross_amount, fee_rate, ctx: Optional[ArithmeticContext] = None) -> Decimal:
    with resolve_context(ctx).scope():
        rate = check_fee_rate(fee_rate)
        return to_decimal(gross_amount, "gross_amount") * (1 - rate)


def get_fee_inside(
    lower_base_fee_factor,
    lower_quote_fee_factor,
    upper_base_fee_factor,
    upper_quote_fee_factor,
    lower_limit,
    upper_limit,
    curr_limit,
    market_base_fee_factor,
    market_quote_fee_factor,
    ctx: Optional[ArithmeticContext] = None
) -> Tuple[Decimal, Decimal]:
    """Fee growth accrued inside a limit range.

    Boundary fee factors record growth on the far side of the boundary from
    the current limit, so they are flipped against the market total when the
    current limit lies on the other side.

    Returns:
        (base_fee_factor, quote_fee_factor) inside the range
    """
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_limit, "curr_limit")
        lower = to_decimal(lower_limit, "lower_limit")
        upper = to_decimal(upper_limit, "upper_limit")
        market_base = to_decimal(market_base_fee_factor, "market_base_fee_factor")
        market_quote = to_decimal(market_quote_fee_factor, "market_quote_fee_factor")
        lower_base = to_decimal(lower_base_fee_factor, "lower_base_fee_factor")
        lower_quote = to_decimal(lower_quote_fee_factor, "lower_quote_fee_factor")
        upper_base = to_decimal(upper_base_fee_factor, "upper_base_fee_factor")
        upper_quote = to_decimal(upper_quote_fee_factor, "upper_quote_fee_factor")

        if curr >= lower:
            base_below, quote_below = lower_base, lower_quote
        else:
            base_below, quote_below = market_base - lower_base, market_quote - lower_quote

        if curr < upper:
            base_above, quote_above = upper_base, upper_quote
        else:
            base_above, quote_above = market_base - upper_base, market_quote - upper_quote

        return (
            market_base - base_below - base_above,
            market_quote - quote_below - quote_above
        )
