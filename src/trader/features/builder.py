"""Feature vector construction from a candle window.

Turns the most recent candles into the 10-element FeatureVector fed to the
model scorers. The builder is pure and deterministic: identical input
yields bit-identical output.

Robustness contract:
  - Upstream NaN/Infinity/negative prices are substituted with the last
    valid close (0 when none has been seen yet) before any math runs.
  - Every zero denominator resolves to a defined value (0, 50 or 0.5).
  - Every output passes through finite_or and the documented clamps.
"""

import math
from collections.abc import Sequence

from trader.config import FeatureSettings
from trader.exceptions import InsufficientDataError
from trader.indicators.moving_averages import sma
from trader.indicators.oscillators import rsi
from trader.logging import get_logger
from trader.models import Candle, FeatureVector

logger = get_logger(__name__)

_MOMENTUM_LOOKBACK = 10
_VOLATILITY_WINDOW = 20
_VOLUME_FAST = 5
_VOLUME_SLOW = 20
_RANGE_WINDOW = 50
_TREND_WINDOW = 20
_MA_PAIRS: tuple[tuple[int, int], ...] = ((5, 20), (10, 50), (20, 100))
#: Smallest window every feature can be computed on, whatever the settings say.
_FLOOR_CANDLES = _VOLATILITY_WINDOW + 1


def finite_or(value: float, default: float) -> float:
    """Return ``value`` if it is a finite number, else ``default``."""
    return value if math.isfinite(value) else default


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _valid_price(value: float) -> bool:
    return math.isfinite(value) and value >= 0


def sanitize_candles(candles: Sequence[Candle]) -> list[Candle]:
    """Replace non-finite or negative fields so downstream math stays finite.

    Prices fall back to the last valid close, volume falls back to 0.
    High and low are widened to cover open and close after substitution.
    """
    cleaned: list[Candle] = []
    last_close = 0.0
    replaced = 0
    for candle in candles:
        if _valid_price(candle.close):
            close = candle.close
        else:
            close = last_close
            replaced += 1
        fields = []
        for value in (candle.open, candle.high, candle.low):
            if _valid_price(value):
                fields.append(value)
            else:
                fields.append(close)
                replaced += 1
        open_, high, low = fields
        volume = candle.volume if _valid_price(candle.volume) else 0.0
        cleaned.append(
            Candle(
                open_time=candle.open_time,
                open=open_,
                high=max(high, open_, close),
                low=min(low, open_, close),
                close=close,
                volume=volume,
            )
        )
        last_close = close

    if replaced:
        logger.debug("candles_sanitized", replaced_fields=replaced, candles=len(candles))
    return cleaned


def _momentum(closes: list[float]) -> float:
    if len(closes) <= _MOMENTUM_LOOKBACK:
        return 0.0
    base = closes[-1 - _MOMENTUM_LOOKBACK]
    if base == 0:
        return 0.0
    return closes[-1] / base - 1.0


def _volatility(closes: list[float]) -> float:
    window = closes[-(_VOLATILITY_WINDOW + 1) :]
    returns = [cur / prev - 1.0 if prev != 0 else 0.0 for prev, cur in zip(window, window[1:])]
    if not returns:
        return 0.0
    mean = sum(returns) / len(returns)
    return math.sqrt(sum((r - mean) ** 2 for r in returns) / len(returns))


def _ma_cross(closes: list[float], fast: int, slow: int) -> float:
    slow = min(slow, len(closes))
    fast_ma = sma(closes[-fast:], fast)
    slow_ma = sma(closes[-slow:], slow)
    if not fast_ma or not slow_ma or slow_ma[-1] == 0:
        return 0.0
    return (fast_ma[-1] - slow_ma[-1]) / slow_ma[-1]


def _last_rsi(closes: list[float], period: int) -> float:
    values = rsi(closes, period)
    return values[-1] if values else 50.0


def _volume_trend(volumes: list[float]) -> float:
    slow_window = volumes[-_VOLUME_SLOW:]
    fast_window = volumes[-_VOLUME_FAST:]
    slow = sum(slow_window) / len(slow_window)
    if slow == 0:
        return 0.0
    fast = sum(fast_window) / len(fast_window)
    return fast / slow - 1.0


def _range_position(window: list[Candle]) -> float:
    highest = max(c.high for c in window)
    lowest = min(c.low for c in window)
    if highest == lowest:
        return 0.5
    return (window[-1].close - lowest) / (highest - lowest)


def _trend_strength(closes: list[float]) -> float:
    """Absolute least-squares slope per bar, normalized by the mean close."""
    window = closes[-_TREND_WINDOW:]
    n = len(window)
    mean_y = sum(window) / n
    if mean_y == 0:
        return 0.0
    mean_x = (n - 1) / 2
    denominator = sum((x - mean_x) ** 2 for x in range(n))
    numerator = sum((x - mean_x) * (y - mean_y) for x, y in enumerate(window))
    return abs(numerator / denominator) / mean_y


class FeatureBuilder:
    """Builds the fixed-length FeatureVector from a candle window.

    Args:
        settings: Feature settings (minimum window length).
    """

    def __init__(self, settings: FeatureSettings | None = None) -> None:
        self._settings = settings or FeatureSettings()

    @property
    def min_candles(self) -> int:
        return max(self._settings.min_candles, _FLOOR_CANDLES)

    def build(self, candles: Sequence[Candle]) -> FeatureVector:
        """Compute the 10 features for the latest candle.

        Args:
            candles: Candle window ordered ascending by open_time.

        Returns:
            FeatureVector with every element finite and in range.

        Raises:
            InsufficientDataError: If fewer than ``min_candles`` candles.
        """
        if len(candles) < self.min_candles:
            raise InsufficientDataError(self.min_candles, len(candles))

        clean = sanitize_candles(candles)
        closes = [c.close for c in clean]
        volumes = [c.volume for c in clean]

        ma_crosses = [finite_or(_ma_cross(closes, a, b), 0.0) for a, b in _MA_PAIRS]

        return FeatureVector(
            momentum=finite_or(_momentum(closes), 0.0),
            volatility=finite_or(_volatility(closes), 0.0),
            ma_cross_5_20=ma_crosses[0],
            ma_cross_10_50=ma_crosses[1],
            ma_cross_20_100=ma_crosses[2],
            rsi_14=_clamp(finite_or(_last_rsi(closes, 14), 50.0), 0.0, 100.0),
            rsi_28=_clamp(finite_or(_last_rsi(closes, 28), 50.0), 0.0, 100.0),
            volume_trend=finite_or(_volume_trend(volumes), 0.0),
            price_range_position=_clamp(
                finite_or(_range_position(clean[-_RANGE_WINDOW:]), 0.5), 0.0, 1.0
            ),
            trend_strength=finite_or(_trend_strength(closes), 0.0),
        )
