"""Shared value types, interfaces and errors."""

from .errors import EngineError, DomainError, InvalidRate, SlippageExceeded
from .interfaces import (
    Trend, PositionRange, SpreadQuote, VirtualPosition, TokenAmounts,
    SwapRequest, SwapResult, SwapOutcome, ISpreadStrategy, IFeePolicy
)

__all__ = [
    'EngineError', 'DomainError', 'InvalidRate', 'SlippageExceeded',
    'Trend', 'PositionRange', 'SpreadQuote', 'VirtualPosition', 'TokenAmounts',
    'SwapRequest', 'SwapResult', 'SwapOutcome', 'ISpreadStrategy', 'IFeePolicy'
]
