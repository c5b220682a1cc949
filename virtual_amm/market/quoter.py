"""
Market quoting facade.

Wires a spread strategy, virtual position construction and the swap engine
together the way a market-making bot consumes them. Reserves and swap amounts
are raw token units; the oracle price is quote per whole base token.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from ..config.config_manager import MarketParams
from ..core.errors import EngineError
from ..core.interfaces import (
    ISpreadStrategy, SpreadQuote, SwapOutcome, SwapRequest, SwapResult, Trend,
    VirtualPosition, ZERO
)
from ..math.context import ArithmeticContext, resolve_context, to_decimal
from ..spread.spread_math import get_delta, get_virtual_position
from ..spread.strategies import BasicStrategy, ReplicatingStrategy, ReversionStrategy
from ..swap.fee_policies import FEE_POLICIES
from ..swap.swap_engine import SwapEngine

logger = logging.getLogger(__name__)


def build_strategy(params: MarketParams) -> ISpreadStrategy:
    """Instantiate the spread strategy named by a market."""
    if params.strategy == 'basic':
        return BasicStrategy(params.min_spread, params.range, params.max_delta)
    elif params.strategy == 'replicating':
        return ReplicatingStrategy(params.range, params.max_delta)
    elif params.strategy == 'reversion':
        return ReversionStrategy(params.range)
    raise ValueError(f"Unknown strategy '{params.strategy}'")


class MarketQuoter:
    """Quotes and simulates swaps for one market."""

    def __init__(self, params: MarketParams, ctx: Optional[ArithmeticContext] = None):
        self.params = params
        self.ctx = resolve_context(ctx)
        self.strategy = build_strategy(params)
        self.engine = SwapEngine(FEE_POLICIES[params.fee_policy]())

    def _whole_tokens(self, base_reserves, quote_reserves) -> Tuple[Decimal, Decimal]:
        base = to_decimal(base_reserves, "base_reserves") / Decimal(10) ** self.params.base_decimals
        quote = to_decimal(quote_reserves, "quote_reserves") / Decimal(10) ** self.params.quote_decimals
        return base, quote

    def quote_ranges(
        self,
        oracle_price,
        base_reserves,
        quote_reserves,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO
    ) -> SpreadQuote:
        """Bid and ask limit ranges for the current oracle price and reserves."""
        with self.ctx.scope():
            base, quote = self._whole_tokens(base_reserves, quote_reserves)
            return self.strategy.quote(
                oracle_price,
                base_reserves=base,
                quote_reserves=quote,
                base_decimals=self.params.base_decimals,
                quote_decimals=self.params.quote_decimals,
                trend=trend,
                cached_price=cached_price,
                ctx=self.ctx
            )

    def virtual_positions(
        self,
        oracle_price,
        base_reserves,
        quote_reserves,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO
    ) -> Tuple[VirtualPosition, VirtualPosition]:
        """Bid position funded by quote reserves and ask position funded by base reserves.

        Strategies that quote in raw price space get raw reserves; the others
        get whole-token reserves and are rescaled by the swap engine.
        """
        with self.ctx.scope():
            spread = self.quote_ranges(oracle_price, base_reserves, quote_reserves, trend, cached_price)
            if self.strategy.scales_oracle_price:
                base = to_decimal(base_reserves, "base_reserves")
                quote = to_decimal(quote_reserves, "quote_reserves")
            else:
                base, quote = self._whole_tokens(base_reserves, quote_reserves)

            bid = get_virtual_position(True, spread.bid.lower_limit, spread.bid.upper_limit, quote, self.ctx)
            ask = get_virtual_position(False, spread.ask.lower_limit, spread.ask.upper_limit, base, self.ctx)
            return bid, ask

    def delta(self, oracle_price, base_reserves, quote_reserves) -> Decimal:
        """Skew-driven limit shift for the current reserves."""
        with self.ctx.scope():
            base, quote = self._whole_tokens(base_reserves, quote_reserves)
            return get_delta(self.params.max_delta, base, quote, oracle_price, self.ctx)

    def swap(
        self,
        request: SwapRequest,
        oracle_price,
        base_reserves,
        quote_reserves,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO
    ) -> SwapResult:
        """Simulate a swap, raising on any engine error.

        Buys trade against the ask position, sells against the bid position.
        """
        bid, ask = self.virtual_positions(oracle_price, base_reserves, quote_reserves, trend, cached_price)
        position = ask if request.is_buy else bid

        if self.strategy.scales_oracle_price:
            return self.engine.get_swap_amounts(request, position, ctx=self.ctx)
        return self.engine.get_swap_amounts(
            request,
            position,
            base_decimals=self.params.base_decimals,
            quote_decimals=self.params.quote_decimals,
            ctx=self.ctx
        )

    def simulate_swap(
        self,
        request: SwapRequest,
        oracle_price,
        base_reserves,
        quote_reserves,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO
    ) -> SwapOutcome:
        """Simulate a swap, returning engine errors in the outcome instead of raising."""
        try:
            result = self.swap(request, oracle_price, base_reserves, quote_reserves, trend, cached_price)
        except EngineError as e:
            logger.info(f"Swap rejected on market {self.params.name}: {e}")
            return SwapOutcome.failure(e)
        return SwapOutcome.success(result)
