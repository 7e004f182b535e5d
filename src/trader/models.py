"""Shared data models for the trading engine.

Market data, features and signal confidences are float (they feed numeric
models). All monetary values held by the risk, position and P&L layers use
Decimal. Never use float for position quantities, prices of fills, or P&L.
"""

import math
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"


class Direction(str, Enum):
    """Directional call produced by a strategy or model."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class PositionSide(str, Enum):
    """Position direction."""

    LONG = "long"
    SHORT = "short"


class Horizon(str, Enum):
    """Prediction horizons with a dedicated model."""

    M5 = "5m"
    H1 = "1h"
    H4 = "4h"


class PredictionMode(str, Enum):
    """NORMAL asks one model, PRECISION polls every horizon and votes."""

    NORMAL = "normal"
    PRECISION = "precision"


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar. Ordered ascending by open_time (Unix milliseconds)."""

    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float


FEATURE_NAMES: tuple[str, ...] = (
    "momentum",
    "volatility",
    "ma_cross_5_20",
    "ma_cross_10_50",
    "ma_cross_20_100",
    "rsi_14",
    "rsi_28",
    "volume_trend",
    "price_range_position",
    "trend_strength",
)


@dataclass(frozen=True)
class FeatureVector:
    """Fixed-length normalized summary of a candle window.

    Every element is finite. rsi_* lie in [0, 100] and
    price_range_position in [0, 1].
    """

    momentum: float
    volatility: float
    ma_cross_5_20: float
    ma_cross_10_50: float
    ma_cross_20_100: float
    rsi_14: float
    rsi_28: float
    volume_trend: float
    price_range_position: float
    trend_strength: float

    def as_list(self) -> list[float]:
        """Return the features in canonical order."""
        return [getattr(self, name) for name in FEATURE_NAMES]

    def __len__(self) -> int:
        return len(FEATURE_NAMES)


@dataclass
class Signal:
    """Directional call with a confidence in [0, 1].

    Out-of-range or non-finite confidences are clamped on construction.
    """

    direction: Direction
    confidence: float
    reason: str
    source: str
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not math.isfinite(self.confidence):
            self.confidence = 0.0
        self.confidence = max(0.0, min(1.0, self.confidence))


@dataclass
class Position:
    """Net position in one symbol. Quantity is signed: + long, - short."""

    symbol: str
    quantity: Decimal
    avg_price: Decimal

    @property
    def is_flat(self) -> bool:
        return self.quantity == Decimal("0")

    @property
    def side(self) -> PositionSide | None:
        if self.quantity > 0:
            return PositionSide.LONG
        if self.quantity < 0:
            return PositionSide.SHORT
        return None


@dataclass(frozen=True)
class Fill:
    """Executed order slice reported by the order execution collaborator."""

    id: str
    symbol: str
    side: OrderSide
    quantity: Decimal
    price: Decimal
    timestamp: float


@dataclass(frozen=True)
class PnLSnapshot:
    """Point-in-time P&L view. equity already includes unrealized P&L."""

    timestamp: float
    equity: Decimal
    realized_today: Decimal
    unrealized: Decimal
