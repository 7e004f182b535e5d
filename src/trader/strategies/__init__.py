"""Rule-based strategies producing directional signals from raw candles."""

from trader.config import StrategySettings
from trader.strategies.base import INSUFFICIENT_CANDLES, Strategy
from trader.strategies.ema import EMACrossoverStrategy
from trader.strategies.macd import MACDStrategy
from trader.strategies.oscillator_zones import (
    BollingerBandsStrategy,
    StochasticStrategy,
    WilliamsRStrategy,
)
from trader.strategies.rsi import RSIStrategy, detect_divergence


def default_strategies(settings: StrategySettings | None = None) -> list[Strategy]:
    """Instantiate every built-in strategy with shared settings."""
    settings = settings or StrategySettings()
    return [
        RSIStrategy(settings),
        MACDStrategy(settings),
        EMACrossoverStrategy(settings),
        StochasticStrategy(settings),
        WilliamsRStrategy(settings),
        BollingerBandsStrategy(settings),
    ]


__all__ = [
    "INSUFFICIENT_CANDLES",
    "BollingerBandsStrategy",
    "EMACrossoverStrategy",
    "MACDStrategy",
    "RSIStrategy",
    "StochasticStrategy",
    "Strategy",
    "WilliamsRStrategy",
    "default_strategies",
    "detect_divergence",
]
