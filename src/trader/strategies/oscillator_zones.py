"""Zone-based oscillator strategies: Stochastic, Williams %R, Bollinger bands.

Each grades its call by conviction: a cross or band touch inside an
extreme zone is a strong signal, merely sitting in the zone is weak, and
anything else is HOLD.
"""

from trader.config import StrategySettings
from trader.indicators.oscillators import stochastic, williams_r
from trader.indicators.volatility import bollinger_bands
from trader.models import Candle, Direction, Signal
from trader.strategies.base import Strategy

WEAK_ZONE_CONFIDENCE = 0.3


class StochasticStrategy(Strategy):
    """%K/%D crossover inside the overbought/oversold zones."""

    name = "Stochastic"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.k_period = settings.stoch_k_period
        self.d_period = settings.stoch_d_period
        self.overbought = settings.stoch_overbought
        self.oversold = settings.stoch_oversold

    def required_candles(self) -> int:
        return (self.k_period + self.d_period) * 2

    def _evaluate(self, candles: list[Candle]) -> Signal:
        result = stochastic(candles, self.k_period, self.d_period)
        if len(result.d) < 2:
            return self._signal(Direction.HOLD, 0.0, "stochastic_unavailable")

        k, prev_k = result.k[-1], result.k[-2]
        d, prev_d = result.d[-1], result.d[-2]

        if k < self.oversold and d < self.oversold:
            if k > d and prev_k <= prev_d:
                depth = (self.oversold - min(k, d)) / self.oversold if self.oversold > 0 else 1.0
                return self._signal(
                    Direction.BUY, min(0.9, 0.7 + 0.2 * depth), "Stochastic bullish cross in oversold zone"
                )
            return self._signal(Direction.BUY, 0.4, "Stochastic in oversold zone")

        if k > self.overbought and d > self.overbought:
            if k < d and prev_k >= prev_d:
                room = 100.0 - self.overbought
                depth = (min(k, d) - self.overbought) / room if room > 0 else 1.0
                return self._signal(
                    Direction.SELL, min(0.9, 0.7 + 0.2 * depth), "Stochastic bearish cross in overbought zone"
                )
            return self._signal(Direction.SELL, 0.4, "Stochastic in overbought zone")

        return self._signal(Direction.HOLD, 0.3, f"Stochastic neutral at {k:.1f}")


class WilliamsRStrategy(Strategy):
    """Williams %R zone entries and exits."""

    name = "Williams %R"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.period = settings.williams_period
        self.overbought = settings.williams_overbought
        self.oversold = settings.williams_oversold

    def required_candles(self) -> int:
        return self.period + 5

    def _evaluate(self, candles: list[Candle]) -> Signal:
        values = williams_r(candles, self.period)
        if len(values) < 2:
            return self._signal(Direction.HOLD, 0.0, "williams_r_unavailable")

        current, previous = values[-1], values[-2]

        if current < self.oversold <= previous:
            depth = (self.oversold - current) / (self.oversold + 100.0) if self.oversold > -100 else 1.0
            return self._signal(
                Direction.BUY, min(0.9, 0.6 + 0.3 * depth), "Williams %R entering oversold territory"
            )
        if current > self.overbought >= previous:
            depth = (current - self.overbought) / -self.overbought if self.overbought < 0 else 1.0
            return self._signal(
                Direction.SELL, min(0.9, 0.6 + 0.3 * depth), "Williams %R entering overbought territory"
            )
        if current > self.oversold >= previous:
            return self._signal(Direction.BUY, 0.7, "Williams %R exiting oversold territory")
        if current < self.overbought <= previous:
            return self._signal(Direction.SELL, 0.7, "Williams %R exiting overbought territory")
        if current < self.oversold:
            return self._signal(Direction.BUY, WEAK_ZONE_CONFIDENCE, "Williams %R in oversold territory")
        if current > self.overbought:
            return self._signal(Direction.SELL, WEAK_ZONE_CONFIDENCE, "Williams %R in overbought territory")

        return self._signal(Direction.HOLD, 0.3, "Williams %R in neutral range")


class BollingerBandsStrategy(Strategy):
    """Mean-reversion on Bollinger band touches."""

    name = "Bollinger Bands"

    def __init__(self, settings: StrategySettings | None = None) -> None:
        settings = settings or StrategySettings()
        self.period = settings.bollinger_period
        self.std_devs = settings.bollinger_std_dev

    def required_candles(self) -> int:
        return self.period + 5

    def _evaluate(self, candles: list[Candle]) -> Signal:
        closes = [c.close for c in candles]
        bands = bollinger_bands(closes, self.period, self.std_devs)
        if len(bands.middle) < 2:
            return self._signal(Direction.HOLD, 0.0, "bollinger_unavailable")

        price, previous = closes[-1], closes[-2]
        upper, lower = bands.upper[-1], bands.lower[-1]
        width = upper - lower
        if width == 0:
            return self._signal(Direction.HOLD, 0.1, "Bollinger bands collapsed (flat prices)")

        position = (price - lower) / width

        if price <= lower and previous > bands.lower[-2]:
            return self._signal(
                Direction.BUY, min(0.9, 0.5 + 0.5 * (1.0 - position)), "Price touched lower Bollinger Band"
            )
        if price >= upper and previous < bands.upper[-2]:
            return self._signal(
                Direction.SELL, min(0.9, 0.5 + 0.5 * position), "Price touched upper Bollinger Band"
            )
        if position < 0.2:
            return self._signal(Direction.BUY, WEAK_ZONE_CONFIDENCE, "Price near lower Bollinger Band")
        if position > 0.8:
            return self._signal(Direction.SELL, WEAK_ZONE_CONFIDENCE, "Price near upper Bollinger Band")

        return self._signal(Direction.HOLD, 0.1, "Price within normal Bollinger Band range")
