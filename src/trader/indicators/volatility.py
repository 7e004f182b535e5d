"""Volatility indicators: true range, ATR and Bollinger bands."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from trader.indicators.moving_averages import sma
from trader.models import Candle


@dataclass
class BollingerBands:
    """Upper, middle (SMA) and lower bands, all the same length."""

    upper: list[float] = field(default_factory=list)
    middle: list[float] = field(default_factory=list)
    lower: list[float] = field(default_factory=list)


def true_range(candles: Sequence[Candle]) -> list[float]:
    """True range for every candle after the first.

    TR = max(high - low, |high - prev_close|, |low - prev_close|)
    """
    return [
        max(cur.high - cur.low, abs(cur.high - prev.close), abs(cur.low - prev.close))
        for prev, cur in zip(candles, candles[1:])
    ]


def atr(candles: Sequence[Candle], period: int = 14) -> list[float]:
    """Average True Range with Wilder smoothing.

    Seeds with the mean of the first ``period`` true ranges, then applies
    ``atr = (atr * (period - 1) + tr) / period``.

    Returns:
        ``len(candles) - period`` values, empty when fewer than
        ``period + 1`` candles are supplied.
    """
    if period <= 0 or len(candles) < period + 1:
        return []

    ranges = true_range(candles)
    current = sum(ranges[:period]) / period
    result = [current]
    for tr in ranges[period:]:
        current = (current * (period - 1) + tr) / period
        result.append(current)
    return result


def bollinger_bands(
    values: Sequence[float], period: int = 20, std_devs: float = 2.0
) -> BollingerBands:
    """Bollinger bands using the population standard deviation of each window."""
    middle = sma(values, period)
    if not middle:
        return BollingerBands()

    upper: list[float] = []
    lower: list[float] = []
    for i, mean in enumerate(middle):
        window = values[i : i + period]
        std = math.sqrt(sum((v - mean) ** 2 for v in window) / period)
        upper.append(mean + std_devs * std)
        lower.append(mean - std_devs * std)

    return BollingerBands(upper=upper, middle=middle, lower=lower)
