"""Core value types and interfaces for the quoting framework."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .errors import EngineError


ZERO = Decimal(0)


class Trend(Enum):
    """Market trend signal supplied by the caller."""
    UP = "up"
    DOWN = "down"
    RANGE = "range"


@dataclass(frozen=True)
class PositionRange:
    """Limit range of one side of the quote. A zeroed range is not quoted."""
    lower_limit: Decimal
    upper_limit: Decimal

    @classmethod
    def zero(cls) -> "PositionRange":
        return cls(ZERO, ZERO)

    @property
    def is_zero(self) -> bool:
        return self.lower_limit == 0 and self.upper_limit == 0


@dataclass(frozen=True)
class SpreadQuote:
    """Bid and ask ranges produced by a spread strategy."""
    bid: PositionRange
    ask: PositionRange


@dataclass(frozen=True)
class VirtualPosition:
    """Synthetic liquidity position, recomputed on every call."""
    lower_sqrt_price: Decimal
    upper_sqrt_price: Decimal
    liquidity: Decimal

    @property
    def is_degenerate(self) -> bool:
        return self.liquidity == 0 or self.lower_sqrt_price >= self.upper_sqrt_price


@dataclass(frozen=True)
class TokenAmounts:
    """Base and quote amounts backing a liquidity delta."""
    base_amount: Decimal
    quote_amount: Decimal


@dataclass(frozen=True)
class SwapRequest:
    """Trade request against a virtual position."""
    is_buy: bool
    exact_input: bool
    amount: Decimal
    fee_rate: Decimal = ZERO
    threshold_sqrt_price: Optional[Decimal] = None
    threshold_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class SwapResult:
    """Amounts settled by a swap."""
    amount_in: Decimal
    amount_out: Decimal
    fees: Decimal
    next_sqrt_price: Decimal


@dataclass(frozen=True)
class SwapOutcome:
    """Result type separating a settled swap from an engine error."""
    result: Optional[SwapResult] = None
    error: Optional[EngineError] = None

    @classmethod
    def success(cls, result: SwapResult) -> "SwapOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: EngineError) -> "SwapOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> SwapResult:
        """Return the swap result or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.result


class ISpreadStrategy(ABC):
    """Interface for virtual position placement strategies."""

    # Strategies that quote in raw token units set this so the swap
    # engine does not rescale their positions a second time.
    scales_oracle_price = False

    @abstractmethod
    def quote(
        self,
        oracle_price,
        base_reserves=ZERO,
        quote_reserves=ZERO,
        base_decimals: int = 18,
        quote_decimals: int = 18,
        trend: Trend = Trend.RANGE,
        cached_price=ZERO,
        ctx=None
    ) -> SpreadQuote:
        """Compute bid and ask limit ranges around an oracle price."""
        pass


class IFeePolicy(ABC):
    """Interface for swap fee settlement policies."""

    @abstractmethod
    def curve_amount(self, request: SwapRequest, ctx=None) -> Decimal:
        """Amount handed to the curve walk."""
        pass

    @abstractmethod
    def settle(self, request: SwapRequest, realized_in: Decimal, ctx=None) -> Tuple[Decimal, Decimal]:
        """Turn the realized curve input into (amount_in, fees)."""
        pass
