"""Pricing and swap simulation engine for a concentrated liquidity market maker."""

from .core import (
    EngineError, DomainError, InvalidRate, SlippageExceeded, Trend, PositionRange,
    SpreadQuote, VirtualPosition, TokenAmounts, SwapRequest, SwapResult, SwapOutcome
)
from .math import ArithmeticContext, Rounding, DEFAULT_CONTEXT
from .spread import BasicStrategy, ReplicatingStrategy, ReversionStrategy, get_virtual_position
from .swap import SwapEngine, FeeOnRealizedInput, FeeOnRequestedInput
from .market import MarketQuoter

__version__ = "0.1.0"

__all__ = [
    'EngineError', 'DomainError', 'InvalidRate', 'SlippageExceeded', 'Trend',
    'PositionRange', 'SpreadQuote', 'VirtualPosition', 'TokenAmounts',
    'SwapRequest', 'SwapResult', 'SwapOutcome',
    'ArithmeticContext', 'Rounding', 'DEFAULT_CONTEXT',
    'BasicStrategy', 'ReplicatingStrategy', 'ReversionStrategy', 'get_virtual_position',
    'SwapEngine', 'FeeOnRealizedInput', 'FeeOnRequestedInput', 'MarketQuoter'
]
