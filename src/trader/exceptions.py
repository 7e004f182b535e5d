"""Custom exceptions for the trading engine.

Pure computation layers (indicators, features, strategies) never raise
these for numeric hazards; they substitute defined fallback values instead.
Decision and execution layers raise only on caller contract breaches.
"""


class TraderError(Exception):
    """Base exception for all engine errors."""


class InsufficientDataError(TraderError):
    """Raised when a candle window is shorter than the required minimum."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"not enough candles (need {required}, have {available})")
        self.required = required
        self.available = available


class ScorerError(TraderError):
    """Raised by a ModelScorer when the model is unavailable or fails."""


class InvariantViolation(TraderError):
    """Base for caller contract breaches that could mask accounting bugs."""


class InvalidFillError(InvariantViolation):
    """Raised when a fill has a non-positive quantity or price."""


class FlatPositionError(InvariantViolation):
    """Raised when reducing or closing a symbol that has no open position."""


class RiskLimitExceeded(TraderError):
    """Raised when the daily loss limit prevents opening a new trade."""


class NonFiniteValueError(InvariantViolation):
    """Raised when a NaN or infinite amount would enter a running total."""
