"""Tests for MACDStrategy and EMACrossoverStrategy.

Cross events are located by growing a V-shaped (or inverted) series one
bar at a time, so each assertion sees the exact bar where the lines cross.
The first leg accelerates so the lines keep a clear gap until the turn.
"""

import pytest

from trader.indicators import ema, macd
from trader.models import Direction
from trader.strategies import EMACrossoverStrategy, MACDStrategy

_DECLINE = [200.0 - 0.02 * i * i for i in range(60)]
_ADVANCE = [100.0 + 0.02 * i * i for i in range(60)]
V_SHAPE = _DECLINE + [_DECLINE[-1] + 2.0 * (i + 1) for i in range(60)]
INVERTED_V = _ADVANCE + [_ADVANCE[-1] - 2.0 * (i + 1) for i in range(60)]


def _first_signal(strategy, candles, direction: Direction):
    for end in range(strategy.required_candles(), len(candles) + 1):
        signal = strategy.signal(candles[:end])
        if signal.direction is direction:
            return end, signal
    return None, None


class TestMACDStrategy:
    def test_required_candles(self) -> None:
        assert MACDStrategy().required_candles() == 26 + 9 + 10

    def test_short_window(self, make_candles) -> None:
        signal = MACDStrategy().signal(make_candles([100.0] * 44))
        assert signal.direction is Direction.HOLD
        assert signal.confidence == 0.0

    def test_no_cross_holds(self, flat_candles) -> None:
        signal = MACDStrategy().signal(flat_candles)
        assert signal.direction is Direction.HOLD
        assert signal.confidence == pytest.approx(0.3)

    def test_bullish_cross(self, make_candles) -> None:
        candles = make_candles(V_SHAPE)
        end, signal = _first_signal(MACDStrategy(), candles, Direction.BUY)
        assert signal is not None
        result = macd([c.close for c in candles[:end]])
        assert result.macd[-2] <= result.signal[-2]
        assert result.macd[-1] > result.signal[-1]
        assert signal.confidence == pytest.approx(min(1.0, abs(result.histogram[-1]) * 100))

    def test_bearish_cross(self, make_candles) -> None:
        candles = make_candles(INVERTED_V)
        end, signal = _first_signal(MACDStrategy(), candles, Direction.SELL)
        assert signal is not None
        result = macd([c.close for c in candles[:end]])
        assert result.macd[-1] < result.signal[-1]
        assert signal.reason == "MACD crossed below signal line"


class TestEMACrossoverStrategy:
    def test_required_candles(self) -> None:
        assert EMACrossoverStrategy().required_candles() == 42

    def test_flat_holds(self, flat_candles) -> None:
        signal = EMACrossoverStrategy().signal(flat_candles)
        assert signal.direction is Direction.HOLD
        assert signal.confidence == pytest.approx(0.3)

    def test_bullish_cross_confidence(self, make_candles) -> None:
        candles = make_candles(V_SHAPE)
        end, signal = _first_signal(EMACrossoverStrategy(), candles, Direction.BUY)
        assert signal is not None
        closes = [c.close for c in candles[:end]]
        fast, slow = ema(closes, 9)[-1], ema(closes, 21)[-1]
        assert fast > slow
        assert signal.confidence == pytest.approx(min(1.0, (fast - slow) / slow * 10))

    def test_bearish_cross(self, make_candles) -> None:
        _, signal = _first_signal(EMACrossoverStrategy(), make_candles(INVERTED_V), Direction.SELL)
        assert signal is not None
        assert signal.source == "EMA Crossover"
