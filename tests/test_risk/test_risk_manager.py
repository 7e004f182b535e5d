"""Tests for RiskManager -- sizing, default stops and the daily loss gate."""

from decimal import Decimal

import pytest

from trader.config import RiskSettings
from trader.exceptions import InvariantViolation, NonFiniteValueError
from trader.models import OrderSide
from trader.risk.manager import RiskManager


@pytest.fixture
def risk_manager() -> RiskManager:
    return RiskManager(RiskSettings())


# ---- position_size ----


class TestPositionSize:
    def test_reference_example(self, risk_manager: RiskManager) -> None:
        qty = risk_manager.position_size(Decimal("10000"), Decimal("45000"), Decimal("44000"))
        assert qty == Decimal("0.1")

    def test_accepts_floats(self, risk_manager: RiskManager) -> None:
        assert risk_manager.position_size(10000.0, 45000.0, 44000.0) == Decimal("0.1")

    def test_stop_above_entry_uses_distance(self, risk_manager: RiskManager) -> None:
        qty = risk_manager.position_size(Decimal("10000"), Decimal("45000"), Decimal("46000"))
        assert qty == Decimal("0.1")

    @pytest.mark.parametrize("equity", [Decimal("0"), Decimal("-500")])
    def test_non_positive_equity_is_zero(self, risk_manager: RiskManager, equity: Decimal) -> None:
        assert risk_manager.position_size(equity, Decimal("100"), Decimal("90")) == Decimal("0")

    def test_zero_stop_distance_is_zero(self, risk_manager: RiskManager) -> None:
        assert risk_manager.position_size(Decimal("10000"), Decimal("100"), Decimal("100")) == Decimal("0")

    @pytest.mark.parametrize(
        ("equity", "entry", "stop"),
        [
            (float("nan"), 45000.0, 44000.0),
            (float("inf"), 45000.0, 44000.0),
            (10000.0, float("nan"), 44000.0),
            (10000.0, 45000.0, float("-inf")),
        ],
    )
    def test_non_finite_input_is_zero(
        self, risk_manager: RiskManager, equity: float, entry: float, stop: float
    ) -> None:
        assert risk_manager.position_size(equity, entry, stop) == Decimal("0")

    def test_tiny_stop_distance_is_large_but_finite(self, risk_manager: RiskManager) -> None:
        qty = risk_manager.position_size(Decimal("10000"), Decimal("100"), Decimal("99.99999999"))
        assert qty == Decimal("10000000000")
        assert qty.is_finite()


# ---- default stops ----


class TestDefaultStops:
    def test_buy_side(self, risk_manager: RiskManager) -> None:
        assert risk_manager.default_sl(Decimal("45000"), OrderSide.BUY) == Decimal("44550")
        assert risk_manager.default_tp(Decimal("45000"), OrderSide.BUY) == Decimal("45675")

    def test_sell_side_is_mirrored(self, risk_manager: RiskManager) -> None:
        assert risk_manager.default_sl(Decimal("45000"), OrderSide.SELL) == Decimal("45450")
        assert risk_manager.default_tp(Decimal("45000"), OrderSide.SELL) == Decimal("44325")


# ---- daily loss gate ----


class TestDailyLossGate:
    def test_fresh_manager_can_trade(self, risk_manager: RiskManager) -> None:
        assert risk_manager.can_trade(Decimal("10000")) is True
        assert risk_manager.daily_realized == Decimal("0")

    def test_just_above_limit_can_trade(self, risk_manager: RiskManager) -> None:
        risk_manager.record(Decimal("-499.99"), Decimal("10000"))
        assert risk_manager.can_trade(Decimal("10000")) is True

    def test_boundary_counts_as_breached(self, risk_manager: RiskManager) -> None:
        risk_manager.record(Decimal("-499.99"), Decimal("10000"))
        risk_manager.record(Decimal("-0.01"), Decimal("10000"))
        assert risk_manager.daily_realized == Decimal("-500")
        assert risk_manager.can_trade(Decimal("10000")) is False

    def test_profits_after_breach_do_not_reopen(self, risk_manager: RiskManager) -> None:
        risk_manager.record(Decimal("-600"), Decimal("10000"))
        risk_manager.record(Decimal("1000"), Decimal("10000"))
        assert risk_manager.daily_realized == Decimal("400")
        assert risk_manager.can_trade(Decimal("10000")) is False

    def test_reset_day_reopens(self, risk_manager: RiskManager) -> None:
        risk_manager.record(Decimal("-600"), Decimal("10000"))
        risk_manager.reset_day()
        assert risk_manager.daily_realized == Decimal("0")
        assert risk_manager.can_trade(Decimal("10000")) is True

    def test_gains_are_recorded_but_not_clamped(self, risk_manager: RiskManager) -> None:
        risk_manager.record(Decimal("1000"), Decimal("10000"))
        risk_manager.record(Decimal("-1500"), Decimal("10000"))
        assert risk_manager.daily_realized == Decimal("-500")
        assert risk_manager.can_trade(Decimal("10000")) is False


class TestNonFiniteAmounts:
    @pytest.mark.parametrize("equity", [float("nan"), float("inf")])
    def test_non_finite_equity_cannot_trade(self, risk_manager: RiskManager, equity: float) -> None:
        assert risk_manager.can_trade(equity) is False

    def test_non_finite_equity_does_not_close_gate(self, risk_manager: RiskManager) -> None:
        risk_manager.can_trade(float("nan"))
        assert risk_manager.can_trade(Decimal("10000")) is True

    @pytest.mark.parametrize("pnl", [float("nan"), float("-inf"), Decimal("NaN")])
    def test_non_finite_pnl_rejected(self, risk_manager: RiskManager, pnl) -> None:
        risk_manager.record(Decimal("-10"), Decimal("10000"))
        with pytest.raises(NonFiniteValueError):
            risk_manager.record(pnl, Decimal("10000"))
        assert risk_manager.daily_realized == Decimal("-10")
        assert risk_manager.can_trade(Decimal("10000")) is True

    def test_error_is_invariant_violation(self) -> None:
        assert issubclass(NonFiniteValueError, InvariantViolation)


# ---- update_params ----


class TestUpdateParams:
    def test_updates_value(self, risk_manager: RiskManager) -> None:
        risk_manager.update_params(max_risk_percent_per_trade=Decimal("2"))
        qty = risk_manager.position_size(Decimal("10000"), Decimal("45000"), Decimal("44000"))
        assert qty == Decimal("0.2")

    def test_clamps_out_of_range(self, risk_manager: RiskManager) -> None:
        settings = risk_manager.update_params(
            max_risk_percent_per_trade=Decimal("250"),
            default_sl_percent=Decimal("0"),
        )
        assert settings.max_risk_percent_per_trade == Decimal("100")
        assert settings.default_sl_percent == Decimal("0.01")
        assert settings.max_daily_loss_percent == Decimal("5.0")

    def test_rejects_unknown_parameter(self, risk_manager: RiskManager) -> None:
        with pytest.raises(ValueError, match="leverage"):
            risk_manager.update_params(leverage=Decimal("10"))
