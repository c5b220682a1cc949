"""
Virtual position placement strategies.

Each strategy turns an oracle price into a bid range below it and an ask
range above it. Limits are always expressed at width 1.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..core.errors import DomainError
from ..core.interfaces import ISpreadStrategy, PositionRange, SpreadQuote, Trend, ZERO
from ..math.context import ArithmeticContext, resolve_context, to_decimal
from ..math.price_math import price_to_limit
from .spread_math import get_delta

logger = logging.getLogger(__name__)


def _non_negative(value, name: str) -> Decimal:
    result = to_decimal(value, name)
    if result < 0:
        raise DomainError(f"{name} cannot be negative, got {result}")
    return result


def _check_oracle_price(oracle_price) -> Decimal:
    price = to_decimal(oracle_price, "oracle_price")
    if price.is_zero():
        raise DomainError("Oracle price is zero")
    if price < 0:
        raise DomainError(f"Oracle price must be positive, got {price}")
    return price


class BasicStrategy(ISpreadStrategy):
    """Fixed minimum spread either side of the oracle, shifted by inventory skew."""

    def __init__(self, min_spread, range, max_delta=ZERO):
        self.min_spread = _non_negative(min_spread, "min_spread")
        self.range = _non_negative(range, "range")
        self.max_delta = _non_negative(max_delta, "max_delta")

    def position_range(
        self,
        is_bid: bool,
        oracle_price,
        delta=ZERO,
        ctx: Optional[ArithmeticContext] = None
    ) -> PositionRange:
        """Range of one side; the ask rounds its anchor limit up, the bid down."""
        with resolve_context(ctx).scope():
            limit = price_to_limit(_check_oracle_price(oracle_price), 1, not is_bid, ctx)
            delta = to_decimal(delta, "delta")
            if is_bid:
                upper = limit - self.min_spread + delta
                return PositionRange(upper - self.range, upper)
            lower = limit + self.min_spread + delta
            return PositionRange(lower, lower + self.range)

    def quote(
        self,
        oracle_price,
        base_reserves=ZERO,
        quote_reserves=ZERO,
        base_decimals: int = 18,
        quote_decimals: int = 18,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO,
        ctx: Optional[ArithmeticContext] = None
    ) -> SpreadQuote:
        with resolve_context(ctx).scope():
            price = _check_oracle_price(oracle_price)
            delta = get_delta(self.max_delta, base_reserves, quote_reserves, price, ctx)
            return SpreadQuote(
                bid=self.position_range(True, price, delta, ctx),
                ask=self.position_range(False, price, delta, ctx)
            )


class ReplicatingStrategy(ISpreadStrategy):
    """Both sides anchored at the oracle limit; spread comes only from skew.

    The oracle price is converted to raw token units before quoting, so the
    resulting ranges are in raw price space.
    """

    scales_oracle_price = True

    def __init__(self, range, max_delta=ZERO):
        self.range = _non_negative(range, "range")
        self.max_delta = _non_negative(max_delta, "max_delta")

    def position_range(
        self,
        is_bid: bool,
        oracle_price,
        delta=ZERO,
        base_decimals: int = 18,
        quote_decimals: int = 18,
        ctx: Optional[ArithmeticContext] = None
    ) -> PositionRange:
        with resolve_context(ctx).scope():
            scaled = _check_oracle_price(oracle_price) * Decimal(10) ** (quote_decimals - base_decimals)
            limit = price_to_limit(scaled, 1, not is_bid, ctx)
            anchor = limit + to_decimal(delta, "delta")
            if is_bid:
                return PositionRange(anchor - self.range, anchor)
            return PositionRange(anchor, anchor + self.range)

    def quote(
        self,
        oracle_price,
        base_reserves=ZERO,
        quote_reserves=ZERO,
        base_decimals: int = 18,
        quote_decimals: int = 18,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO,
        ctx: Optional[ArithmeticContext] = None
    ) -> SpreadQuote:
        with resolve_context(ctx).scope():
            price = _check_oracle_price(oracle_price)
            delta = get_delta(self.max_delta, base_reserves, quote_reserves, price, ctx)
            return SpreadQuote(
                bid=self.position_range(True, price, delta, base_decimals, quote_decimals, ctx),
                ask=self.position_range(False, price, delta, base_decimals, quote_decimals, ctx)
            )


class ReversionStrategy(ISpreadStrategy):
    """Trend-following quotes with hysteresis around a cached reference price.

    In an up trend the bid follows the price up while the ask only covers the
    ground back down to the cached bid; a down trend mirrors this on the ask.
    A ranging market quotes symmetrically around the oracle.
    """

    def __init__(self, range):
        self.range = _non_negative(range, "range")

    def _ranges(self, price, ctx):
        limit = price_to_limit(price, 1, False, ctx)
        bid = PositionRange(limit - self.range, limit)
        ask = PositionRange(limit, limit + self.range)
        return bid, ask

    def quote(
        self,
        oracle_price,
        base_reserves=ZERO,
        quote_reserves=ZERO,
        base_decimals: int = 18,
        quote_decimals: int = 18,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO,
        ctx: Optional[ArithmeticContext] = None
    ) -> SpreadQuote:
        with resolve_context(ctx).scope():
            price = _check_oracle_price(oracle_price)
            cached = to_decimal(cached_price, "cached_price")
            if cached.is_zero():
                cached = price

            new_bid, new_ask = self._ranges(price, ctx)
            cached_bid, cached_ask = self._ranges(cached, ctx)

            if trend == Trend.UP:
                return self._trend_up(new_bid, new_ask, cached_bid)
            elif trend == Trend.DOWN:
                return self._trend_down(new_bid, new_ask, cached_ask)
            return SpreadQuote(bid=new_bid, ask=new_ask)

    @staticmethod
    def _trend_up(new_bid, new_ask, cached_bid) -> SpreadQuote:
        if new_bid.upper_limit > cached_bid.upper_limit:
            logger.debug("Up trend: price above cached bid, following with bid only")
            return SpreadQuote(bid=new_bid, ask=PositionRange.zero())
        if new_ask.lower_limit <= cached_bid.lower_limit:
            logger.debug("Up trend: price crossed cached bid, quoting it as ask")
            return SpreadQuote(bid=PositionRange.zero(), ask=cached_bid)
        if new_ask.lower_limit >= cached_bid.upper_limit:
            return SpreadQuote(
                bid=PositionRange(cached_bid.lower_limit, new_bid.upper_limit),
                ask=PositionRange.zero()
            )
        return SpreadQuote(
            bid=PositionRange(cached_bid.lower_limit, new_bid.upper_limit),
            ask=PositionRange(new_ask.lower_limit, cached_bid.upper_limit)
        )

    @staticmethod
    def _trend_down(new_bid, new_ask, cached_ask) -> SpreadQuote:
        if new_ask.lower_limit < cached_ask.lower_limit:
            logger.debug("Down trend: price below cached ask, following with ask only")
            return SpreadQuote(bid=PositionRange.zero(), ask=new_ask)
        if new_bid.upper_limit >= cached_ask.upper_limit:
            logger.debug("Down trend: price crossed cached ask, quoting it as bid")
            return SpreadQuote(bid=cached_ask, ask=PositionRange.zero())
        if new_bid.upper_limit <= cached_ask.lower_limit:
            return SpreadQuote(
                bid=PositionRange.zero(),
                ask=PositionRange(new_ask.lower_limit, cached_ask.upper_limit)
            )
        return SpreadQuote(
            bid=PositionRange(cached_ask.lower_limit, new_bid.upper_limit),
            ask=PositionRange(new_ask.lower_limit, cached_ask.upper_limit)
        )


STRATEGIES = ('basic', 'replicating', 'reversion')
