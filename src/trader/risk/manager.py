"""Pre-trade risk engine: position sizing, default stops, daily loss gate.

  - position_size: risk a fixed percent of equity over the stop distance
  - default_sl / default_tp: percent offsets from entry, mirrored by side
  - can_trade: closed once realized P&L since reset_day() reaches the
    daily loss limit (boundary counts as breached)

The daily accumulator is a signed running sum. Gains are recorded too, but
once the gate has closed only reset_day() reopens it. Day boundaries are
detected by the caller; this class never reads the clock.

One instance per account/session. Not safe for uncoordinated concurrent
writers.
"""

from decimal import Decimal

from trader.config import RiskSettings
from trader.exceptions import NonFiniteValueError
from trader.logging import get_logger
from trader.models import OrderSide

logger = get_logger(__name__)

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")

# (min, max) percent for each tunable accepted by update_params.
PARAM_BOUNDS: dict[str, tuple[Decimal, Decimal]] = {
    "max_risk_percent_per_trade": (Decimal("0.01"), Decimal("100")),
    "max_daily_loss_percent": (Decimal("0.01"), Decimal("100")),
    "default_sl_percent": (Decimal("0.01"), Decimal("50")),
    "default_tp_percent": (Decimal("0.01"), Decimal("100")),
}


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert to Decimal, going through str() for floats."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class RiskManager:
    """Per-account risk manager.

    Args:
        settings: Risk parameters (percent values). Defaults to
            RiskSettings() i.e. 1% per trade, 5% daily loss, 1% SL, 1.5% TP.
    """

    def __init__(self, settings: RiskSettings | None = None) -> None:
        self._settings = settings or RiskSettings()
        self._daily_realized = _ZERO
        self._breached = False

    @property
    def settings(self) -> RiskSettings:
        return self._settings

    @property
    def daily_realized(self) -> Decimal:
        """Signed realized P&L since the last reset_day()."""
        return self._daily_realized

    def position_size(
        self,
        equity: Decimal | float,
        entry: Decimal | float,
        stop: Decimal | float,
    ) -> Decimal:
        """Quantity that loses max_risk_percent_per_trade of equity at the stop.

        qty = (equity * max_risk_percent_per_trade / 100) / |entry - stop|

        Args:
            equity: Account equity in quote currency.
            entry: Planned entry price.
            stop: Stop-loss price.

        Returns:
            Quantity as Decimal. 0 when equity <= 0, entry == stop, or any
            input is NaN or infinite.
            There is no upper cap: a tiny stop distance yields a large size.
        """
        equity, entry, stop = to_decimal(equity), to_decimal(entry), to_decimal(stop)
        if not (equity.is_finite() and entry.is_finite() and stop.is_finite()):
            logger.warning(
                "position_size_non_finite_input", equity=str(equity), entry=str(entry), stop=str(stop)
            )
            return _ZERO
        if equity <= _ZERO:
            return _ZERO

        distance = abs(entry - stop)
        if distance == _ZERO:
            logger.warning("position_size_zero_stop_distance", entry=str(entry))
            return _ZERO

        risk_amount = equity * self._settings.max_risk_percent_per_trade / _HUNDRED
        return risk_amount / distance

    def default_sl(self, entry: Decimal | float, side: OrderSide) -> Decimal:
        """Stop-loss below entry for buys, above for sells."""
        offset = self._settings.default_sl_percent / _HUNDRED
        entry = to_decimal(entry)
        if side is OrderSide.BUY:
            return entry * (1 - offset)
        return entry * (1 + offset)

    def default_tp(self, entry: Decimal | float, side: OrderSide) -> Decimal:
        """Take-profit above entry for buys, below for sells."""
        offset = self._settings.default_tp_percent / _HUNDRED
        entry = to_decimal(entry)
        if side is OrderSide.BUY:
            return entry * (1 + offset)
        return entry * (1 - offset)

    def daily_loss_limit(self, equity: Decimal | float) -> Decimal:
        """Loss amount (positive) at which the gate closes."""
        return to_decimal(equity) * self._settings.max_daily_loss_percent / _HUNDRED

    def can_trade(self, equity: Decimal | float) -> bool:
        """Check the daily loss gate.

        Returns:
            False iff the gate was already closed today or the daily
            accumulator is <= -(equity * max_daily_loss_percent / 100).
            Also False for NaN or infinite equity, without closing the gate.
        """
        if self._breached:
            return False

        equity = to_decimal(equity)
        if not equity.is_finite():
            logger.warning("can_trade_non_finite_equity", equity=str(equity))
            return False

        limit = self.daily_loss_limit(equity)
        if self._daily_realized <= -limit:
            self._breached = True
            logger.warning(
                "daily_loss_limit_breached",
                daily_realized=str(self._daily_realized),
                limit=str(limit),
            )
            return False
        return True

    def record(self, realized_pnl: Decimal | float, equity: Decimal | float) -> None:
        """Add realized P&L to the daily accumulator and re-check the gate.

        Raises:
            NonFiniteValueError: If realized_pnl is NaN or infinite. The
                accumulator is left unchanged.
        """
        amount = to_decimal(realized_pnl)
        if not amount.is_finite():
            raise NonFiniteValueError(f"Realized P&L must be finite, got {amount}")
        self._daily_realized += amount
        logger.debug(
            "risk_pnl_recorded",
            realized_pnl=str(realized_pnl),
            daily_realized=str(self._daily_realized),
        )
        self.can_trade(equity)

    def reset_day(self) -> None:
        """Zero the daily accumulator and reopen the gate."""
        logger.info("risk_day_reset", daily_realized=str(self._daily_realized))
        self._daily_realized = _ZERO
        self._breached = False

    def update_params(self, **params: Decimal | float | str) -> RiskSettings:
        """Replace risk parameters, clamping each into its allowed range.

        Args:
            **params: Any of the RiskSettings percent fields.

        Returns:
            The new effective RiskSettings.

        Raises:
            ValueError: If an unknown parameter name is given.
        """
        unknown = set(params) - set(PARAM_BOUNDS)
        if unknown:
            raise ValueError(f"Unknown risk parameter(s): {', '.join(sorted(unknown))}")

        updates: dict[str, Decimal] = {}
        for name, raw in params.items():
            low, high = PARAM_BOUNDS[name]
            value = to_decimal(raw)
            clamped = max(low, min(high, value))
            if clamped != value:
                logger.warning("risk_param_clamped", param=name, requested=str(value), applied=str(clamped))
            updates[name] = clamped

        self._settings = self._settings.model_copy(update=updates)
        logger.info("risk_params_updated", **{k: str(v) for k, v in updates.items()})
        return self._settings
