"""Cumulative volume indicators: On-Balance Volume and VWAP."""

from collections.abc import Sequence

from trader.models import Candle


def obv(candles: Sequence[Candle]) -> list[float]:
    """On-Balance Volume, starting at 0 on the first candle.

    Volume is added on an up close, subtracted on a down close and ignored
    when the close is unchanged.
    """
    if not candles:
        return []

    current = 0.0
    result = [current]
    for prev, cur in zip(candles, candles[1:]):
        if cur.close > prev.close:
            current += cur.volume
        elif cur.close < prev.close:
            current -= cur.volume
        result.append(current)
    return result


def vwap(candles: Sequence[Candle]) -> list[float]:
    """Cumulative volume-weighted average of the typical price.

    Falls back to the candle's typical price while cumulative volume is 0.
    """
    result: list[float] = []
    cum_price_volume = 0.0
    cum_volume = 0.0
    for candle in candles:
        typical = (candle.high + candle.low + candle.close) / 3.0
        cum_price_volume += typical * candle.volume
        cum_volume += candle.volume
        result.append(typical if cum_volume == 0 else cum_price_volume / cum_volume)
    return result
