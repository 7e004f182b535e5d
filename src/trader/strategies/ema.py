"""Fast/slow EMA crossover strategy."""

from trader.config import StrategySettings
from trader.indicators.moving_averages import ema
from trader.models import Candle, Direction, Signal
from trader.strategies.base import Strategy


class EMACrossoverStrategy(Strategy):
    """Exponential moving average crossover strategy.

    Confidence on a cross is the EMA gap relative to the slow EMA, scaled
    by 10 and capped at 1. Without a cross the signal is HOLD at 0.3.
    """

    name = "EMA Crossover"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.fast_period = settings.ema_fast
        self.slow_period = settings.ema_slow

    def required_candles(self) -> int:
        return max(self.fast_period, self.slow_period) * 2

    def _evaluate(self, candles: list[Candle]) -> Signal:
        closes = [c.close for c in candles]
        fast = ema(closes, self.fast_period)
        slow = ema(closes, self.slow_period)
        if len(fast) < 2 or len(slow) < 2:
            return self._signal(Direction.HOLD, 0.0, "ema_unavailable")

        current_fast, previous_fast = fast[-1], fast[-2]
        current_slow, previous_slow = slow[-1], slow[-2]
        gap = abs(current_fast - current_slow) / current_slow if current_slow != 0 else 0.0
        confidence = min(1.0, gap * 10)

        if previous_fast <= previous_slow and current_fast > current_slow:
            return self._signal(Direction.BUY, confidence, "Fast EMA crossed above slow EMA")
        if previous_fast >= previous_slow and current_fast < current_slow:
            return self._signal(Direction.SELL, confidence, "Fast EMA crossed below slow EMA")

        trend = "Bullish" if current_fast > current_slow else "Bearish"
        return self._signal(Direction.HOLD, 0.3, f"{trend} trend, no crossover")
