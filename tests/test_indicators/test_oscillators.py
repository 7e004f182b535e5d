"""Tests for RSI, MACD, Stochastic, Williams %R and ROC.

Covers Wilder smoothing, bounds, zero-division fallbacks and the
empty-result policy for short input.
"""

import math

import pytest

from trader.indicators import macd, rate_of_change, rsi, stochastic, williams_r
from trader.models import Candle


def _bar(high: float, low: float, close: float, i: int = 0) -> Candle:
    return Candle(open_time=i, open=close, high=high, low=low, close=close, volume=1.0)


class TestRSI:
    def test_wilder_smoothing(self) -> None:
        # Seed 0.5/0.5 -> 50, then gain 1 -> 0.75/0.25 -> 75, then loss 1 -> 37.5
        assert rsi([1.0, 2.0, 1.0, 2.0, 1.0], 2) == pytest.approx([50.0, 75.0, 37.5])

    def test_output_length(self) -> None:
        values = [100.0 + math.sin(i) for i in range(40)]
        assert len(rsi(values, 14)) == 40 - 14

    def test_requires_period_plus_one_values(self) -> None:
        assert rsi([1.0] * 14, 14) == []
        assert len(rsi([1.0] * 15, 14)) == 1

    def test_zero_average_loss_is_100(self) -> None:
        assert rsi([100.0 + i for i in range(20)], 14) == pytest.approx([100.0] * 6)

    def test_only_losses_is_0(self) -> None:
        assert rsi([100.0 - i for i in range(20)], 14) == pytest.approx([0.0] * 6)

    def test_strictly_increasing_never_exceeds_100(self) -> None:
        values = rsi([float(i) for i in range(1, 102)], 14)
        assert values
        assert all(v <= 100.0 for v in values)
        assert values[-1] == pytest.approx(100.0)

    def test_bounds_on_noisy_series(self) -> None:
        values = [100.0 + 15 * math.sin(i * 0.7) + 3 * math.cos(i * 2.3) for i in range(200)]
        result = rsi(values, 14)
        assert all(0.0 <= v <= 100.0 for v in result)


class TestMACD:
    def test_lengths_align(self) -> None:
        values = [100.0 + i * 0.5 for i in range(50)]
        result = macd(values, 12, 26, 9)
        assert len(result.macd) == 25
        assert len(result.signal) == 17
        assert len(result.histogram) == 17

    def test_histogram_is_macd_minus_signal(self) -> None:
        values = [100.0 + 5 * math.sin(i / 4) for i in range(80)]
        result = macd(values)
        offset = 9 - 1
        for i, hist in enumerate(result.histogram):
            assert hist == pytest.approx(result.macd[i + offset] - result.signal[i])

    def test_flat_series_is_zero(self) -> None:
        result = macd([50.0] * 60)
        assert result.macd == pytest.approx([0.0] * len(result.macd))

    def test_fast_not_below_slow_is_empty(self) -> None:
        result = macd([1.0] * 60, 26, 12, 9)
        assert result.macd == [] and result.signal == [] and result.histogram == []

    def test_short_input_is_empty(self) -> None:
        assert macd([1.0] * 10).macd == []


class TestStochastic:
    def test_flat_window_is_midpoint(self) -> None:
        candles = [_bar(10.0, 10.0, 10.0, i) for i in range(20)]
        result = stochastic(candles, 14, 3)
        assert result.k == pytest.approx([50.0] * 7)
        assert result.d == pytest.approx([50.0] * 5)

    def test_close_at_high_is_100(self) -> None:
        candles = [_bar(10.0, 0.0, 5.0, i) for i in range(13)] + [_bar(10.0, 0.0, 10.0, 13)]
        assert stochastic(candles, 14, 3).k == pytest.approx([100.0])

    def test_short_input_is_empty(self) -> None:
        assert stochastic([_bar(1, 0, 1)] * 5, 14, 3).k == []


class TestWilliamsR:
    def test_flat_window_is_midpoint(self) -> None:
        candles = [_bar(10.0, 10.0, 10.0, i) for i in range(14)]
        assert williams_r(candles, 14) == pytest.approx([-50.0])

    def test_range_extremes(self) -> None:
        at_high = [_bar(10.0, 0.0, 5.0, i) for i in range(13)] + [_bar(10.0, 0.0, 10.0, 13)]
        at_low = [_bar(10.0, 0.0, 5.0, i) for i in range(13)] + [_bar(10.0, 0.0, 0.0, 13)]
        assert williams_r(at_high, 14) == pytest.approx([0.0])
        assert williams_r(at_low, 14) == pytest.approx([-100.0])


class TestRateOfChange:
    def test_percent_change(self) -> None:
        assert rate_of_change([100.0, 110.0, 99.0], 1) == pytest.approx([10.0, -10.0])

    def test_zero_base_is_zero(self) -> None:
        assert rate_of_change([0.0, 5.0], 1) == [0.0]
