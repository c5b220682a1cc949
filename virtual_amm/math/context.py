"""
Arithmetic context for decimal computations.

Precision and rounding travel as an explicit value. Each operation installs
its context with ``decimal.localcontext``, which is local to the current
thread or asyncio task, so operations with different rounding needs never
leak settings into each other.
"""

import decimal
from contextlib import contextmanager
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

from ..core.errors import DomainError

MIN_PRECISION = 50
DEFAULT_PRECISION = 80


class Rounding(Enum):
    """Rounding directions recognised by the engine."""
    TOWARD_ZERO = decimal.ROUND_DOWN
    AWAY_FROM_ZERO = decimal.ROUND_UP
    UP = decimal.ROUND_CEILING
    DOWN = decimal.ROUND_FLOOR

    @classmethod
    def from_name(cls, name: str) -> "Rounding":
        """Parse a config name such as ``toward_zero``."""
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(r.name.lower() for r in cls)
            raise ValueError(f"Unknown rounding '{name}', expected one of: {valid}")


@dataclass(frozen=True)
class ArithmeticContext:
    """Precision (significant digits) and rounding for one operation."""
    precision: int = DEFAULT_PRECISION
    rounding: Rounding = Rounding.TOWARD_ZERO

    def __post_init__(self):
        if self.precision < MIN_PRECISION:
            raise ValueError(
                f"precision must be at least {MIN_PRECISION} digits, got {self.precision}"
            )

    def with_rounding(self, rounding: Rounding) -> "ArithmeticContext":
        return replace(self, rounding=rounding)

    def to_decimal_context(self) -> decimal.Context:
        return decimal.Context(
            prec=self.precision,
            rounding=self.rounding.value,
            traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow]
        )

    @contextmanager
    def scope(self) -> Iterator[decimal.Context]:
        """Install this context for the duration of a block."""
        with decimal.localcontext(self.to_decimal_context()) as dctx:
            yield dctx


DEFAULT_CONTEXT = ArithmeticContext()


def resolve_context(ctx: Optional[ArithmeticContext]) -> ArithmeticContext:
    return DEFAULT_CONTEXT if ctx is None else ctx


def to_decimal(value, name: str = "value") -> Decimal:
    """Convert caller input to a finite Decimal.

    Floats go through ``str`` so the digits the caller wrote are the ones used.

    Raises:
        DomainError: If the value is missing, malformed or not finite
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise DomainError(f"{name} must be a number, got {value!r}")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except decimal.InvalidOperation as e:
            raise DomainError(f"{name} is not a valid decimal: {value!r}") from e
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise DomainError(f"{name} has unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise DomainError(f"{name} must be finite, got {value!r}")
    return result
