"""RSI threshold strategy with swing divergence override.

Threshold rules:
  - RSI <= oversold  -> BUY,  confidence = min(1, 0.6 + 0.4 * depth)
  - RSI >= overbought -> SELL, confidence = min(1, 0.6 + 0.4 * depth)
  - otherwise HOLD, confidence = max(0.2, 0.5 - 0.3 * |RSI - 50| / 50)

``depth`` is the distance past the threshold normalized by the room left
between the threshold and the scale end (0 or 100).

Divergence over the last 10 points overrides the threshold call: price
making a lower swing low while RSI makes a higher one is bullish, and the
mirror case is bearish.
"""

from trader.config import StrategySettings
from trader.indicators.oscillators import rsi
from trader.models import Candle, Direction, Signal
from trader.strategies.base import Strategy

DIVERGENCE_WINDOW = 10
DIVERGENCE_CONFIDENCE = 0.75


def _swings(values: list[float], highs: bool) -> list[int]:
    """Indices of the last two local extrema (strict on both sides)."""
    found = []
    for i in range(1, len(values) - 1):
        if highs and values[i] > values[i - 1] and values[i] > values[i + 1]:
            found.append(i)
        elif not highs and values[i] < values[i - 1] and values[i] < values[i + 1]:
            found.append(i)
    return found[-2:]


def detect_divergence(closes: list[float], rsi_values: list[float]) -> Direction | None:
    """Return BUY/SELL on bullish/bearish divergence, else None.

    Both series are compared over their last ``DIVERGENCE_WINDOW`` points.
    """
    if len(closes) < DIVERGENCE_WINDOW or len(rsi_values) < DIVERGENCE_WINDOW:
        return None

    prices = closes[-DIVERGENCE_WINDOW:]
    oscillator = rsi_values[-DIVERGENCE_WINDOW:]

    price_lows = _swings(prices, highs=False)
    rsi_lows = _swings(oscillator, highs=False)
    if len(price_lows) == 2 and len(rsi_lows) == 2:
        first, second = price_lows
        if prices[second] < prices[first] and oscillator[rsi_lows[1]] > oscillator[rsi_lows[0]]:
            return Direction.BUY

    price_highs = _swings(prices, highs=True)
    rsi_highs = _swings(oscillator, highs=True)
    if len(price_highs) == 2 and len(rsi_highs) == 2:
        first, second = price_highs
        if prices[second] > prices[first] and oscillator[rsi_highs[1]] < oscillator[rsi_highs[0]]:
            return Direction.SELL

    return None


class RSIStrategy(Strategy):
    """Relative Strength Index momentum strategy."""

    name = "RSI"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.period = settings.rsi_period
        self.overbought = settings.rsi_overbought
        self.oversold = settings.rsi_oversold

    def required_candles(self) -> int:
        return self.period * 3

    def _evaluate(self, candles: list[Candle]) -> Signal:
        closes = [c.close for c in candles]
        values = rsi(closes, self.period)
        if not values:
            return self._signal(Direction.HOLD, 0.0, "rsi_unavailable")

        current = values[-1]

        divergence = detect_divergence(closes, values)
        if divergence is Direction.BUY:
            return self._signal(divergence, DIVERGENCE_CONFIDENCE, "Bullish RSI divergence detected")
        if divergence is Direction.SELL:
            return self._signal(divergence, DIVERGENCE_CONFIDENCE, "Bearish RSI divergence detected")

        if current <= self.oversold:
            depth = (self.oversold - current) / self.oversold if self.oversold > 0 else 1.0
            return self._signal(
                Direction.BUY,
                min(1.0, 0.6 + depth * 0.4),
                f"RSI oversold at {current:.1f} (threshold: {self.oversold:.1f})",
            )

        if current >= self.overbought:
            room = 100.0 - self.overbought
            depth = (current - self.overbought) / room if room > 0 else 1.0
            return self._signal(
                Direction.SELL,
                min(1.0, 0.6 + depth * 0.4),
                f"RSI overbought at {current:.1f} (threshold: {self.overbought:.1f})",
            )

        distance = abs(current - 50.0) / 50.0
        bias = "bullish" if current > 50 else "bearish"
        return self._signal(
            Direction.HOLD,
            max(0.2, 0.5 - distance * 0.3),
            f"RSI neutral at {current:.1f} ({bias} bias)",
        )
