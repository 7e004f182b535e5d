"""Pivot points, swing support/resistance and candlestick patterns.

Pattern thresholds are ratios of body size to range or shadow and are part
of the contract:

- doji: body / range < 0.1 (a candle with zero range is never a doji)
- hammer: lower shadow > 2 * body and upper shadow < 0.5 * body
- shooting star: upper shadow > 2 * body and lower shadow < 0.5 * body
- engulfing: the current body fully covers the previous opposite-colour body
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from trader.models import Candle

DOJI_BODY_RATIO = 0.1
SHADOW_BODY_MULTIPLE = 2.0
OPPOSITE_SHADOW_RATIO = 0.5


class PatternType(str, Enum):
    """Recognized single and two-candle patterns."""

    DOJI = "doji"
    HAMMER = "hammer"
    SHOOTING_STAR = "shooting_star"
    BULLISH_ENGULFING = "bullish_engulfing"
    BEARISH_ENGULFING = "bearish_engulfing"


#: Reliability weight attached to each detected pattern.
PATTERN_STRENGTH: dict[PatternType, float] = {
    PatternType.DOJI: 0.6,
    PatternType.HAMMER: 0.7,
    PatternType.SHOOTING_STAR: 0.7,
    PatternType.BULLISH_ENGULFING: 0.8,
    PatternType.BEARISH_ENGULFING: 0.8,
}


@dataclass(frozen=True)
class CandlePattern:
    """A pattern found at ``index`` in the analysed series."""

    type: PatternType
    index: int
    strength: float


@dataclass(frozen=True)
class PivotPoints:
    """Classic floor-trader pivot levels derived from one candle."""

    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float


def _body(candle: Candle) -> float:
    return abs(candle.close - candle.open)


def _upper_shadow(candle: Candle) -> float:
    return candle.high - max(candle.open, candle.close)


def _lower_shadow(candle: Candle) -> float:
    return min(candle.open, candle.close) - candle.low


def pivot_levels(candle: Candle) -> PivotPoints:
    """Compute pivot, resistance and support levels from a single bar."""
    pivot = (candle.high + candle.low + candle.close) / 3.0
    span = candle.high - candle.low
    return PivotPoints(
        pivot=pivot,
        r1=2 * pivot - candle.low,
        r2=pivot + span,
        r3=candle.high + 2 * (pivot - candle.low),
        s1=2 * pivot - candle.high,
        s2=pivot - span,
        s3=candle.low - 2 * (candle.high - pivot),
    )


def pivot_points(candles: Sequence[Candle]) -> list[PivotPoints]:
    """Pivot levels for every candle (each bar projects the next session)."""
    return [pivot_levels(c) for c in candles]


def support_resistance(
    candles: Sequence[Candle], lookback: int = 5
) -> tuple[list[float], list[float]]:
    """Find swing lows (supports) and swing highs (resistances).

    A bar is a swing low when its low is strictly below every other low
    within ``lookback`` bars on either side; swing highs are mirrored.

    Returns:
        Tuple of (supports, resistances), both empty when fewer than
        ``2 * lookback + 1`` candles are supplied.
    """
    if lookback <= 0 or len(candles) < 2 * lookback + 1:
        return [], []

    supports: list[float] = []
    resistances: list[float] = []
    for i in range(lookback, len(candles) - lookback):
        neighbours = [
            candles[j] for j in range(i - lookback, i + lookback + 1) if j != i
        ]
        if all(n.low > candles[i].low for n in neighbours):
            supports.append(candles[i].low)
        if all(n.high < candles[i].high for n in neighbours):
            resistances.append(candles[i].high)
    return supports, resistances


def is_doji(candle: Candle, threshold: float = DOJI_BODY_RATIO) -> bool:
    span = candle.high - candle.low
    return span > 0 and _body(candle) / span < threshold


def is_hammer(candle: Candle) -> bool:
    body = _body(candle)
    return (
        _lower_shadow(candle) > body * SHADOW_BODY_MULTIPLE
        and _upper_shadow(candle) < body * OPPOSITE_SHADOW_RATIO
    )


def is_shooting_star(candle: Candle) -> bool:
    body = _body(candle)
    return (
        _upper_shadow(candle) > body * SHADOW_BODY_MULTIPLE
        and _lower_shadow(candle) < body * OPPOSITE_SHADOW_RATIO
    )


def is_bullish_engulfing(previous: Candle, current: Candle) -> bool:
    return (
        previous.close < previous.open
        and current.close > current.open
        and current.open < previous.close
        and current.close > previous.open
    )


def is_bearish_engulfing(previous: Candle, current: Candle) -> bool:
    return (
        previous.close > previous.open
        and current.close < current.open
        and current.open > previous.close
        and current.close < previous.open
    )


def detect_patterns(candles: Sequence[Candle]) -> list[CandlePattern]:
    """Scan a series for every recognized pattern.

    Single-candle patterns are checked on every bar after the first so that
    each bar is evaluated against the same history as the two-candle ones.

    Returns:
        Patterns in ascending index order, empty when fewer than 2 candles.
    """
    if len(candles) < 2:
        return []

    found: list[CandlePattern] = []

    def add(kind: PatternType, index: int) -> None:
        found.append(CandlePattern(type=kind, index=index, strength=PATTERN_STRENGTH[kind]))

    for i in range(1, len(candles)):
        previous, current = candles[i - 1], candles[i]
        if is_doji(current):
            add(PatternType.DOJI, i)
        if is_hammer(current):
            add(PatternType.HAMMER, i)
        if is_shooting_star(current):
            add(PatternType.SHOOTING_STAR, i)
        if is_bullish_engulfing(previous, current):
            add(PatternType.BULLISH_ENGULFING, i)
        if is_bearish_engulfing(previous, current):
            add(PatternType.BEARISH_ENGULFING, i)

    return found
