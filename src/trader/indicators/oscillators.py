"""Bounded momentum oscillators: RSI, MACD, Stochastic, Williams %R, ROC.

Division-by-zero hazards are resolved at the point of computation with a
defined value (RSI 100 on zero average loss, Stochastic 50 and Williams %R
-50 on a flat window) so NaN never escapes these functions.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from trader.indicators.moving_averages import ema, sma
from trader.models import Candle


@dataclass
class MACDResult:
    """MACD line, signal line and histogram.

    ``signal`` and ``histogram`` cover only the range where both the MACD
    line and its signal EMA exist, so they are aligned with
    ``macd[signal_period - 1:]``.
    """

    macd: list[float] = field(default_factory=list)
    signal: list[float] = field(default_factory=list)
    histogram: list[float] = field(default_factory=list)


@dataclass
class StochasticResult:
    """%K line and its %D smoothing (aligned with ``k[d_period - 1:]``)."""

    k: list[float] = field(default_factory=list)
    d: list[float] = field(default_factory=list)


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return min(100.0, max(0.0, 100.0 - 100.0 / (1.0 + rs)))


def rsi(values: Sequence[float], period: int = 14) -> list[float]:
    """Relative Strength Index with Wilder smoothing.

    The first point averages gains and losses over the first ``period``
    deltas. Each later point smooths with::

        avg = (avg * (period - 1) + new) / period

    When the average loss is zero the RSI is defined as 100.

    Args:
        values: Closing prices, oldest first.
        period: Lookback period.

    Returns:
        ``len(values) - period`` RSI values in [0, 100], or an empty list
        when fewer than ``period + 1`` values are supplied.
    """
    if period <= 0 or len(values) < period + 1:
        return []

    gains: list[float] = []
    losses: list[float] = []
    for prev, cur in zip(values, values[1:]):
        change = cur - prev
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result = [_rsi_value(avg_gain, avg_loss)]

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_rsi_value(avg_gain, avg_loss))

    return result


def macd(
    values: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """Moving Average Convergence Divergence.

    The fast EMA is aligned on the slow EMA's start offset
    (``slow_period - fast_period``) before subtracting.

    Returns:
        MACDResult with empty lists when the input is too short or the
        periods are inconsistent (fast must be shorter than slow).
    """
    if fast_period <= 0 or signal_period <= 0 or fast_period >= slow_period:
        return MACDResult()

    fast = ema(values, fast_period)
    slow = ema(values, slow_period)
    if not slow:
        return MACDResult()

    offset = slow_period - fast_period
    macd_line = [fast[i + offset] - slow[i] for i in range(len(slow))]

    signal_line = ema(macd_line, signal_period)
    start = signal_period - 1
    histogram = [macd_line[i + start] - s for i, s in enumerate(signal_line)]

    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


def stochastic(
    candles: Sequence[Candle], k_period: int = 14, d_period: int = 3
) -> StochasticResult:
    """Stochastic oscillator %K/%D.

    %K = (close - lowest_low) / (highest_high - lowest_low) * 100, or 50 when
    the window has no range.
    """
    if k_period <= 0 or len(candles) < k_period:
        return StochasticResult()

    k_values: list[float] = []
    for end in range(k_period, len(candles) + 1):
        window = candles[end - k_period : end]
        highest = max(c.high for c in window)
        lowest = min(c.low for c in window)
        if highest == lowest:
            k_values.append(50.0)
        else:
            k_values.append((window[-1].close - lowest) / (highest - lowest) * 100.0)

    return StochasticResult(k=k_values, d=sma(k_values, d_period))


def williams_r(candles: Sequence[Candle], period: int = 14) -> list[float]:
    """Williams %R in [-100, 0]; -50 on a window with no range."""
    if period <= 0 or len(candles) < period:
        return []

    result: list[float] = []
    for end in range(period, len(candles) + 1):
        window = candles[end - period : end]
        highest = max(c.high for c in window)
        lowest = min(c.low for c in window)
        if highest == lowest:
            result.append(-50.0)
        else:
            result.append((highest - window[-1].close) / (highest - lowest) * -100.0)
    return result


def rate_of_change(values: Sequence[float], period: int = 10) -> list[float]:
    """Percentage change over ``period`` bars; 0 where the base value is 0."""
    if period <= 0 or len(values) <= period:
        return []
    return [
        (values[i] / values[i - period] - 1.0) * 100.0 if values[i - period] != 0 else 0.0
        for i in range(period, len(values))
    ]
