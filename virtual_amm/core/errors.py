"""Error taxonomy shared by the pricing and swap modules."""

from decimal import Decimal


class EngineError(ValueError):
    """Base class for every failure raised by the engine."""


class DomainError(EngineError):
    """Raised for inputs outside the numeric domain (non-positive prices, widths, ...)."""


class InvalidRate(EngineError):
    """Raised when a fee rate is not in [0, 1)."""


class SlippageExceeded(EngineError):
    """Raised when a swap violates the caller's threshold amount."""

    def __init__(self, message: str, amount: Decimal, threshold: Decimal):
        super().__init__(message)
        self.amount = amount
        self.threshold = threshold
