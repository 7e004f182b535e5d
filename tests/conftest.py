"""Shared test fixtures for the trading engine."""

import math
from collections.abc import Callable, Sequence

import pytest

from trader.config import AppSettings, FusionSettings, PredictionSettings, RiskSettings
from trader.models import Candle

CandleFactory = Callable[..., list[Candle]]


def _build_candles(
    closes: Sequence[float],
    volumes: Sequence[float] | None = None,
    spread: float = 0.5,
    start: int = 1_700_000_000_000,
    step: int = 60_000,
) -> list[Candle]:
    """Candles whose open is the previous close, padded by ``spread``."""
    candles = []
    previous = closes[0] if closes else 0.0
    for i, close in enumerate(closes):
        open_ = previous
        candles.append(
            Candle(
                open_time=start + i * step,
                open=open_,
                high=max(open_, close) + spread,
                low=min(open_, close) - spread,
                close=close,
                volume=volumes[i] if volumes is not None else 1000.0,
            )
        )
        previous = close
    return candles


@pytest.fixture
def make_candles() -> CandleFactory:
    """Return a factory building candles from a close series."""
    return _build_candles


@pytest.fixture
def rising_candles() -> list[Candle]:
    """150 candles with strictly increasing closes."""
    return _build_candles([100.0 + i for i in range(150)])


@pytest.fixture
def flat_candles() -> list[Candle]:
    """150 identical candles with no range at all."""
    return _build_candles([100.0] * 150, spread=0.0)


@pytest.fixture
def wave_candles() -> list[Candle]:
    """150 candles following a sine wave around 100."""
    return _build_candles([100.0 + 10.0 * math.sin(i / 5.0) for i in range(150)])


@pytest.fixture
def app_settings() -> AppSettings:
    """Return AppSettings with default risk, seeded demo mode."""
    return AppSettings(
        log_level="DEBUG",
        risk=RiskSettings(),
        prediction=PredictionSettings(demo_seed=7),
        fusion=FusionSettings(),
    )
