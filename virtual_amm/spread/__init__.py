"""Spread engine: skew helpers and virtual position placement strategies."""

from .spread_math import get_skew, get_delta, get_virtual_position
from .strategies import BasicStrategy, ReplicatingStrategy, ReversionStrategy, STRATEGIES

__all__ = [
    'get_skew', 'get_delta', 'get_virtual_position',
    'BasicStrategy', 'ReplicatingStrategy', 'ReversionStrategy', 'STRATEGIES'
]
