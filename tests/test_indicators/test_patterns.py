"""Tests for pivot points, swing levels and candlestick patterns."""

import pytest

from trader.indicators import PatternType, detect_patterns, pivot_points, support_resistance
from trader.indicators.patterns import (
    is_bearish_engulfing,
    is_bullish_engulfing,
    is_doji,
    is_hammer,
    is_shooting_star,
    pivot_levels,
)
from trader.models import Candle


def _bar(open_: float, high: float, low: float, close: float) -> Candle:
    return Candle(open_time=0, open=open_, high=high, low=low, close=close, volume=1.0)


class TestPivotPoints:
    def test_classic_levels(self) -> None:
        levels = pivot_levels(_bar(100, 110, 90, 105))
        pivot = (110 + 90 + 105) / 3
        assert levels.pivot == pytest.approx(pivot)
        assert levels.r1 == pytest.approx(2 * pivot - 90)
        assert levels.s1 == pytest.approx(2 * pivot - 110)
        assert levels.r2 == pytest.approx(pivot + 20)
        assert levels.s2 == pytest.approx(pivot - 20)
        assert levels.r3 == pytest.approx(110 + 2 * (pivot - 90))
        assert levels.s3 == pytest.approx(90 - 2 * (110 - pivot))

    def test_one_level_set_per_candle(self) -> None:
        assert len(pivot_points([_bar(1, 2, 0, 1)] * 4)) == 4


class TestSupportResistance:
    def test_finds_swing_points(self) -> None:
        lows = [5, 4, 3, 2, 1, 2, 3, 4, 5]
        candles = [_bar(low + 1, low + 2 if i != 4 else 10, low, low + 1) for i, low in enumerate(lows)]
        supports, resistances = support_resistance(candles, lookback=2)
        assert supports == [1]
        assert resistances == [10]

    def test_short_input_is_empty(self) -> None:
        assert support_resistance([_bar(1, 2, 0, 1)] * 4, lookback=2) == ([], [])


class TestSingleCandlePatterns:
    def test_doji(self) -> None:
        assert is_doji(_bar(100.0, 105.0, 95.0, 100.5))

    def test_zero_range_is_not_doji(self) -> None:
        assert not is_doji(_bar(100.0, 100.0, 100.0, 100.0))

    def test_hammer(self) -> None:
        # body 1, lower shadow 5, upper shadow 0.2
        assert is_hammer(_bar(100.0, 101.2, 95.0, 101.0))
        assert not is_shooting_star(_bar(100.0, 101.2, 95.0, 101.0))

    def test_shooting_star(self) -> None:
        assert is_shooting_star(_bar(101.0, 106.0, 99.8, 100.0))


class TestEngulfing:
    def test_bullish(self) -> None:
        assert is_bullish_engulfing(_bar(105, 106, 99, 100), _bar(99, 107, 98, 106))

    def test_bearish(self) -> None:
        assert is_bearish_engulfing(_bar(100, 106, 99, 105), _bar(106, 107, 98, 99))

    def test_same_colour_is_not_engulfing(self) -> None:
        assert not is_bullish_engulfing(_bar(100, 106, 99, 105), _bar(99, 107, 98, 106))


class TestDetectPatterns:
    def test_reports_index_and_strength(self) -> None:
        candles = [_bar(105, 106, 99, 100), _bar(99, 107, 98, 106)]
        found = detect_patterns(candles)
        engulfing = [p for p in found if p.type is PatternType.BULLISH_ENGULFING]
        assert len(engulfing) == 1
        assert engulfing[0].index == 1
        assert engulfing[0].strength == pytest.approx(0.8)

    def test_single_candle_is_empty(self) -> None:
        assert detect_patterns([_bar(100.0, 105.0, 95.0, 100.5)]) == []
