"""Feature extraction: candle windows to normalized model inputs."""

from trader.features.builder import FeatureBuilder, finite_or, sanitize_candles

__all__ = ["FeatureBuilder", "finite_or", "sanitize_candles"]
