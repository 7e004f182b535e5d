"""Tests for compute_metrics and aggregate_daily."""

from datetime import date
from decimal import Decimal

from trader.analytics.metrics import PnLMetrics, aggregate_daily, compute_metrics
from trader.models import Fill, OrderSide
from trader.position.ledger import FillResult

DAY = 86_400.0


def _result(timestamp: float, pnl: str) -> FillResult:
    fill = Fill(
        id=f"f-{timestamp}",
        symbol="BTCUSDT",
        side=OrderSide.SELL,
        quantity=Decimal("1"),
        price=Decimal("100"),
        timestamp=timestamp,
    )
    return FillResult(fill=fill, position=None, realized_pnl=Decimal(pnl))


class TestComputeMetrics:
    def test_empty_is_all_zero(self) -> None:
        assert compute_metrics([]) == PnLMetrics()

    def test_mixed_trades(self) -> None:
        metrics = compute_metrics([Decimal(v) for v in ("10", "-5", "20", "-30", "5")])
        assert metrics.trades == 5
        assert metrics.wins == 3
        assert metrics.losses == 2
        assert metrics.win_rate == Decimal("0.600")
        assert metrics.gross_profit == Decimal("35")
        assert metrics.gross_loss == Decimal("-35")
        assert metrics.net_pnl == Decimal("0")
        assert metrics.avg_trade_pnl == Decimal("0")
        assert metrics.avg_loss == Decimal("-17.5")
        assert metrics.max_drawdown == Decimal("-30")

    def test_zero_pnl_is_neither_win_nor_loss(self) -> None:
        metrics = compute_metrics([Decimal("0"), Decimal("4")])
        assert metrics.trades == 2
        assert metrics.wins == 1
        assert metrics.losses == 0
        assert metrics.win_rate == Decimal("0.500")
        assert metrics.avg_win == Decimal("4")
        assert metrics.avg_loss == Decimal("0")

    def test_only_gains_has_no_drawdown(self) -> None:
        assert compute_metrics([1.5, 2.5]).max_drawdown == Decimal("0")

    def test_win_rate_rounded(self) -> None:
        assert compute_metrics([Decimal("1"), Decimal("1"), Decimal("-1")]).win_rate == Decimal("0.667")


class TestAggregateDaily:
    def test_buckets_by_utc_day(self) -> None:
        rows = aggregate_daily(
            [
                _result(2 * DAY + 10, "5"),
                _result(DAY + 10, "-3"),
                _result(DAY + 500, "8"),
            ]
        )
        assert [r.day for r in rows] == [date(1970, 1, 2), date(1970, 1, 3)]
        assert rows[0].realized == Decimal("5")
        assert rows[0].trades == 2
        assert rows[1].trades == 1

    def test_empty(self) -> None:
        assert aggregate_daily([]) == []
