"""Stateless technical indicators over price series and candles.

Every function returns a sanitized result and never raises: input shorter
than the indicator's period yields an empty result.
"""

from trader.indicators.moving_averages import ema, sma, wma
from trader.indicators.oscillators import (
    MACDResult,
    StochasticResult,
    macd,
    rate_of_change,
    rsi,
    stochastic,
    williams_r,
)
from trader.indicators.patterns import (
    CandlePattern,
    PatternType,
    PivotPoints,
    detect_patterns,
    pivot_points,
    support_resistance,
)
from trader.indicators.volatility import BollingerBands, atr, bollinger_bands, true_range
from trader.indicators.volume import obv, vwap

__all__ = [
    "BollingerBands",
    "CandlePattern",
    "MACDResult",
    "PatternType",
    "PivotPoints",
    "StochasticResult",
    "atr",
    "bollinger_bands",
    "detect_patterns",
    "ema",
    "macd",
    "obv",
    "pivot_points",
    "rate_of_change",
    "rsi",
    "sma",
    "stochastic",
    "support_resistance",
    "true_range",
    "vwap",
    "williams_r",
    "wma",
]
