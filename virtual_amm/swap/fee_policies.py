"""Fee settlement policies for swaps."""

from decimal import Decimal
from typing import Optional, Tuple

from ..core.interfaces import IFeePolicy, SwapRequest
from ..math.context import ArithmeticContext, resolve_context, to_decimal
from ..math.fee_math import gross_to_net, net_to_fee, net_to_gross


class FeeOnRealizedInput(IFeePolicy):
    """Fee charged on top of the input the curve actually consumed.

    The reported amount in is the realized input plus the fee.
    """

    def curve_amount(self, request: SwapRequest, ctx: Optional[ArithmeticContext] = None) -> Decimal:
        return to_decimal(request.amount, "amount")

    def settle(
        self,
        request: SwapRequest,
        realized_in: Decimal,
        ctx: Optional[ArithmeticContext] = None
    ) -> Tuple[Decimal, Decimal]:
        with resolve_context(ctx).scope():
            fees = net_to_fee(realized_in, request.fee_rate, ctx)
            return realized_in + fees, fees


class FeeOnRequestedInput(IFeePolicy):
    """Fee netted out of the requested input before walking the curve.

    For exact input swaps the curve only sees the net amount; the realized
    input is grossed back up and the difference is the fee.
    """

    def curve_amount(self, request: SwapRequest, ctx: Optional[ArithmeticContext] = None) -> Decimal:
        if request.exact_input:
            return gross_to_net(request.amount, request.fee_rate, ctx)
        return to_decimal(request.amount, "amount")

    def settle(
        self,
        request: SwapRequest,
        realized_in: Decimal,
        ctx: Optional[ArithmeticContext] = None
    ) -> Tuple[Decimal, Decimal]:
        with resolve_context(ctx).scope():
            gross = net_to_gross(realized_in, request.fee_rate, ctx)
            return gross, gross - realized_in


FEE_POLICIES = {
    'realized_input': FeeOnRealizedInput,
    'requested_input': FeeOnRequestedInput,
}
