"""Swap engine and fee settlement policies."""

from .fee_policies import FeeOnRealizedInput, FeeOnRequestedInput, FEE_POLICIES
from .swap_engine import (
    SwapEngine, SwapStep, compute_swap_amount, next_sqrt_price_amount_in,
    next_sqrt_price_amount_out, rescale_position
)

__all__ = [
    'FeeOnRealizedInput', 'FeeOnRequestedInput', 'FEE_POLICIES',
    'SwapEngine', 'SwapStep', 'compute_swap_amount', 'next_sqrt_price_amount_in',
    'next_sqrt_price_amount_out', 'rescale_position'
]
