"""Abstract rule strategy interface.

Every rule strategy turns a candle window into a Signal. Strategies are
pure and reentrant: they hold only their immutable parameters. They never
raise; a window shorter than ``required_candles()`` yields HOLD with zero
confidence.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from trader.features.builder import sanitize_candles
from trader.models import Candle, Direction, Signal

INSUFFICIENT_CANDLES = "insufficient_candles"


class Strategy(ABC):
    """Abstract base class for rule strategies.

    Subclasses implement ``required_candles`` and ``_evaluate``. The public
    ``signal`` method enforces the lookback and sanitizes the window before
    delegating.
    """

    name: str = "strategy"

    @abstractmethod
    def required_candles(self) -> int:
        """Minimum lookback, generally 2-3x the slowest period."""
        ...

    @abstractmethod
    def _evaluate(self, candles: list[Candle]) -> Signal:
        """Produce a signal from a sanitized window of sufficient length."""
        ...

    def signal(self, candles: Sequence[Candle]) -> Signal:
        """Evaluate the strategy on the given window.

        Args:
            candles: Candles ordered ascending by open_time.

        Returns:
            The strategy's Signal, or HOLD/0 when the window is too short.
        """
        if len(candles) < self.required_candles():
            return self._signal(Direction.HOLD, 0.0, INSUFFICIENT_CANDLES)
        return self._evaluate(sanitize_candles(candles))

    def _signal(self, direction: Direction, confidence: float, reason: str) -> Signal:
        return Signal(direction=direction, confidence=confidence, reason=reason, source=self.name)
