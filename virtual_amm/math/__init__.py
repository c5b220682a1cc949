"""Price, liquidity and fee mathematics."""

from .context import ArithmeticContext, Rounding, DEFAULT_CONTEXT, to_decimal
from .price_math import (
    BASE, OFFSET, MAX_LIMIT, offset, shift_limit, unshift_limit, max_limit,
    is_valid_limit, limit_to_sqrt_price, limit_to_price, sqrt_price_to_limit,
    price_to_limit
)
from .liquidity_math import (
    add_delta, liquidity_to_quote, liquidity_to_base, quote_to_liquidity,
    base_to_liquidity, liquidity_to_amounts, amounts_to_liquidity
)
from .fee_math import (
    check_fee_rate, fee_rate_from_bps, calc_fee, net_to_fee, net_to_gross,
    gross_to_net, get_fee_inside
)

__all__ = [
    'ArithmeticContext', 'Rounding', 'DEFAULT_CONTEXT', 'to_decimal',
    'BASE', 'OFFSET', 'MAX_LIMIT', 'offset', 'shift_limit', 'unshift_limit',
    'max_limit', 'is_valid_limit', 'limit_to_sqrt_price', 'limit_to_price',
    'sqrt_price_to_limit', 'price_to_limit',
    'add_delta', 'liquidity_to_quote', 'liquidity_to_base', 'quote_to_liquidity',
    'base_to_liquidity', 'liquidity_to_amounts', 'amounts_to_liquidity',
    'check_fee_rate', 'fee_rate_from_bps', 'calc_fee', 'net_to_fee',
    'net_to_gross', 'gross_to_net', 'get_fee_inside'
]
