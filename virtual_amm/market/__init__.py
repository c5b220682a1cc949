"""Market level quoting and swap simulation."""

from .quoter import MarketQuoter, build_strategy

__all__ = ['MarketQuoter', 'build_strategy']
