"""
Single segment swap simulation against a virtual position.

Buys move the sqrt price up from the lower edge of the position, sells move it
down from the upper edge. The walk never leaves the position.
"""

import logging
from decimal import Decimal
from typing import NamedTuple, Optional

from ..core.errors import DomainError, SlippageExceeded
from ..core.interfaces import IFeePolicy, SwapRequest, SwapResult, VirtualPosition
from ..math.context import ArithmeticContext, resolve_context, to_decimal
from ..math.fee_math import check_fee_rate
from ..math.liquidity_math import liquidity_to_base, liquidity_to_quote
from .fee_policies import FeeOnRequestedInput

logger = logging.getLogger(__name__)


class SwapStep(NamedTuple):
    amount_in: Decimal
    amount_out: Decimal
    next_sqrt_price: Decimal


def next_sqrt_price_amount_in(
    curr_sqrt_price,
    liquidity,
    amount_in,
    is_buy: bool,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Sqrt price after adding ``amount_in`` to the curve."""
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_sqrt_price, "curr_sqrt_price")
        liq = to_decimal(liquidity, "liquidity")
        amount = to_decimal(amount_in, "amount_in")
        if is_buy:
            return curr + amount / liq
        return liq * curr / (liq + amount * curr)


def next_sqrt_price_amount_out(
    curr_sqrt_price,
    liquidity,
    amount_out,
    is_buy: bool,
    ctx: Optional[ArithmeticContext] = None
) -> Decimal:
    """Sqrt price after removing ``amount_out`` from the curve."""
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_sqrt_price, "curr_sqrt_price")
        liq = to_decimal(liquidity, "liquidity")
        amount = to_decimal(amount_out, "amount_out")
        if is_buy:
            return liq * curr / (liq - amount * curr)
        return curr - amount / liq


def compute_swap_amount(
    curr_sqrt_price,
    target_sqrt_price,
    liquidity,
    amount_rem,
    exact_input: bool,
    ctx: Optional[ArithmeticContext] = None
) -> SwapStep:
    """Walk the curve from the current price toward the target.

    Input left over once the target is reached stays with the caller and is
    not taken as fee.
    """
    with resolve_context(ctx).scope():
        curr = to_decimal(curr_sqrt_price, "curr_sqrt_price")
        target = to_decimal(target_sqrt_price, "target_sqrt_price")
        remaining = to_decimal(amount_rem, "amount_rem")
        is_buy = target > curr
        amount_in = Decimal(0)
        amount_out = Decimal(0)

        if exact_input:
            if is_buy:
                amount_in = liquidity_to_quote(curr, target, liquidity, ctx)
            else:
                amount_in = liquidity_to_base(target, curr, liquidity, ctx)
            reached_target = remaining >= amount_in
            if reached_target:
                next_sqrt_price = target
            else:
                next_sqrt_price = next_sqrt_price_amount_in(curr, liquidity, remaining, is_buy, ctx)
        else:
            if is_buy:
                amount_out = liquidity_to_base(curr, target, liquidity, ctx)
            else:
                amount_out = liquidity_to_quote(target, curr, liquidity, ctx)
            reached_target = remaining >= amount_out
            if reached_target:
                next_sqrt_price = target
            else:
                next_sqrt_price = next_sqrt_price_amount_out(curr, liquidity, remaining, is_buy, ctx)

        # Keep the side that sized the step when the target was reached exactly
        if is_buy:
            if not reached_target or not exact_input:
                amount_in = liquidity_to_quote(curr, next_sqrt_price, liquidity, ctx)
            if not reached_target or exact_input:
                amount_out = liquidity_to_base(curr, next_sqrt_price, liquidity, ctx)
        else:
            if not reached_target or not exact_input:
                amount_in = liquidity_to_base(next_sqrt_price, curr, liquidity, ctx)
            if not reached_target or exact_input:
                amount_out = liquidity_to_quote(next_sqrt_price, curr, liquidity, ctx)

        if not exact_input and amount_out > remaining:
            amount_out = remaining

        return SwapStep(amount_in, amount_out, next_sqrt_price)


def rescale_position(
    position: VirtualPosition,
    base_decimals: int,
    quote_decimals: int,
    ctx: Optional[ArithmeticContext] = None
) -> VirtualPosition:
    """Convert a position quoted in whole tokens into raw token units."""
    with resolve_context(ctx).scope():
        sqrt_factor = Decimal(10) ** (Decimal(quote_decimals - base_decimals) / 2)
        liquidity_factor = Decimal(10) ** (Decimal(quote_decimals + base_decimals) / 2)
        return VirtualPosition(
            lower_sqrt_price=position.lower_sqrt_price * sqrt_factor,
            upper_sqrt_price=position.upper_sqrt_price * sqrt_factor,
            liquidity=position.liquidity * liquidity_factor
        )


class SwapEngine:
    """Computes swap amounts and fees against a virtual position."""

    def __init__(self, fee_policy: Optional[IFeePolicy] = None):
        self.fee_policy = fee_policy or FeeOnRequestedInput()

    def get_swap_amounts(
        self,
        request: SwapRequest,
        position: VirtualPosition,
        base_decimals: Optional[int] = None,
        quote_decimals: Optional[int] = None,
        ctx: Optional[ArithmeticContext] = None
    ) -> SwapResult:
        """Simulate a swap.

        Args:
            request: Trade direction, mode, amount, fee rate and thresholds
            position: Virtual position to trade against
            base_decimals: With quote_decimals, rescales a position quoted in
                whole tokens so amounts are in raw units
            quote_decimals: See base_decimals
            ctx: Arithmetic context

        Returns:
            Settled amounts, fees and the sqrt price after the swap

        Raises:
            DomainError: If the amount is negative or the threshold price is not positive
            InvalidRate: If the fee rate is outside [0, 1)
            SlippageExceeded: If the threshold amount is violated
        """
        with resolve_context(ctx).scope():
            if base_decimals is not None and quote_decimals is not None:
                position = rescale_position(position, base_decimals, quote_decimals, ctx)

            start_edge = position.lower_sqrt_price if request.is_buy else position.upper_sqrt_price
            if position.is_degenerate:
                logger.debug("Degenerate position, returning empty swap")
                zero = Decimal(0)
                return SwapResult(zero, zero, zero, start_edge)

            amount = to_decimal(request.amount, "amount")
            if amount < 0:
                raise DomainError(f"Swap amount cannot be negative, got {amount}")
            check_fee_rate(request.fee_rate)

            lower = position.lower_sqrt_price
            upper = position.upper_sqrt_price
            start = lower if request.is_buy else upper
            target = self._target_sqrt_price(request, lower, upper)

            curve_amount = self.fee_policy.curve_amount(request, ctx)
            step = compute_swap_amount(
                start, target, position.liquidity, curve_amount, request.exact_input, ctx
            )
            amount_in, fees = self.fee_policy.settle(request, step.amount_in, ctx)
            result = SwapResult(
                amount_in=amount_in,
                amount_out=step.amount_out,
                fees=fees,
                next_sqrt_price=step.next_sqrt_price
            )

            self._check_threshold_amount(request, result)
            return result

    @staticmethod
    def _target_sqrt_price(request: SwapRequest, lower: Decimal, upper: Decimal) -> Decimal:
        if request.threshold_sqrt_price is None:
            return upper if request.is_buy else lower

        threshold = to_decimal(request.threshold_sqrt_price, "threshold_sqrt_price")
        if threshold <= 0:
            raise DomainError(f"threshold_sqrt_price must be positive, got {threshold}")
        # A threshold already behind the start edge leaves nothing to trade
        if request.is_buy:
            return max(min(threshold, upper), lower)
        return min(max(threshold, lower), upper)

    @staticmethod
    def _check_threshold_amount(request: SwapRequest, result: SwapResult):
        if request.threshold_amount is None:
            return
        threshold = to_decimal(request.threshold_amount, "threshold_amount")
        # Zero means no threshold
        if threshold == 0:
            return

        if request.exact_input:
            if result.amount_out < threshold:
                raise SlippageExceeded(
                    f"Threshold amount not met | amount_out: {result.amount_out} "
                    f"< threshold_amount: {threshold}",
                    amount=result.amount_out,
                    threshold=threshold
                )
        elif result.amount_in > threshold:
            raise SlippageExceeded(
                f"Threshold amount exceeded | amount_in: {result.amount_in} "
                f"> threshold_amount: {threshold}",
                amount=result.amount_in,
                threshold=threshold
            )
