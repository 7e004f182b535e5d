"""MACD signal-line crossover strategy.

Looks only at the last two aligned (macd, signal) points. An upward cross
is BUY and a downward cross is SELL, both with confidence
``min(1, |histogram| * 100)``. No cross is HOLD at 0.3.
"""

from trader.config import StrategySettings
from trader.indicators.oscillators import macd
from trader.models import Candle, Direction, Signal
from trader.strategies.base import Strategy

NO_CROSS_CONFIDENCE = 0.3


class MACDStrategy(Strategy):
    """Moving Average Convergence Divergence crossover strategy."""

    name = "MACD"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.fast_period = settings.macd_fast
        self.slow_period = settings.macd_slow
        self.signal_period = settings.macd_signal

    def required_candles(self) -> int:
        return self.slow_period + self.signal_period + 10

    def _evaluate(self, candles: list[Candle]) -> Signal:
        result = macd(
            [c.close for c in candles],
            self.fast_period,
            self.slow_period,
            self.signal_period,
        )
        if len(result.signal) < 2:
            return self._signal(Direction.HOLD, 0.0, "macd_unavailable")

        current_macd, previous_macd = result.macd[-1], result.macd[-2]
        current_signal, previous_signal = result.signal[-1], result.signal[-2]
        confidence = min(1.0, abs(result.histogram[-1]) * 100)

        if previous_macd <= previous_signal and current_macd > current_signal:
            return self._signal(Direction.BUY, confidence, "MACD crossed above signal line")
        if previous_macd >= previous_signal and current_macd < current_signal:
            return self._signal(Direction.SELL, confidence, "MACD crossed below signal line")

        trend = "Bullish" if current_macd > current_signal else "Bearish"
        return self._signal(Direction.HOLD, NO_CROSS_CONFIDENCE, f"{trend} momentum, no crossover")
