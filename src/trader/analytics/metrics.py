"""Performance analytics over realized trade P&L.

Pure Decimal analytics for export/reporting consumers: compute_metrics
summarizes a sequence of realized P&L values in fill order, and
aggregate_daily buckets applied fills by calendar day.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from trader.position.ledger import FillResult
from trader.risk.manager import to_decimal

_ZERO = Decimal("0")


@dataclass(frozen=True)
class PnLMetrics:
    """Aggregate trade statistics.

    gross_loss and avg_loss are negative (or 0); max_drawdown is the
    deepest equity-minus-peak excursion of cumulative P&L, so also <= 0.
    """

    trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: Decimal = _ZERO
    avg_trade_pnl: Decimal = _ZERO
    avg_win: Decimal = _ZERO
    avg_loss: Decimal = _ZERO
    gross_profit: Decimal = _ZERO
    gross_loss: Decimal = _ZERO
    net_pnl: Decimal = _ZERO
    max_drawdown: Decimal = _ZERO


@dataclass(frozen=True)
class DailyPnLRow:
    """Realized P&L and fill count for one calendar day."""

    day: date
    realized: Decimal
    trades: int


def compute_metrics(realized_pnls: Iterable[Decimal | float]) -> PnLMetrics:
    """Summarize realized P&L values, in chronological order.

    A trade with exactly zero P&L counts toward ``trades`` but is neither
    a win nor a loss.

    Args:
        realized_pnls: Realized P&L per trade, oldest first.

    Returns:
        PnLMetrics. All zeros for empty input.
    """
    pnls = [to_decimal(p) for p in realized_pnls]
    if not pnls:
        return PnLMetrics()

    wins = losses = 0
    gross_profit = gross_loss = _ZERO
    equity = peak = max_dd = _ZERO

    for pnl in pnls:
        if pnl > _ZERO:
            wins += 1
            gross_profit += pnl
        elif pnl < _ZERO:
            losses += 1
            gross_loss += pnl
        equity += pnl
        peak = max(peak, equity)
        max_dd = min(max_dd, equity - peak)

    trades = len(pnls)
    win_rate = (Decimal(wins) / Decimal(trades)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)

    return PnLMetrics(
        trades=trades,
        wins=wins,
        losses=losses,
        win_rate=win_rate,
        avg_trade_pnl=sum(pnls, _ZERO) / Decimal(trades),
        avg_win=gross_profit / Decimal(wins) if wins else _ZERO,
        avg_loss=gross_loss / Decimal(losses) if losses else _ZERO,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        net_pnl=gross_profit + gross_loss,
        max_drawdown=max_dd,
    )


def aggregate_daily(
    results: Iterable[FillResult],
    tz: tzinfo = timezone.utc,
) -> list[DailyPnLRow]:
    """Bucket applied fills by calendar day of their timestamp.

    Args:
        results: FillResults from PositionLedger.apply, any order.
        tz: Timezone that defines the day boundary.

    Returns:
        One row per day with activity, oldest day first.
    """
    rows: dict[date, tuple[Decimal, int]] = {}
    for result in results:
        day = datetime.fromtimestamp(result.fill.timestamp, tz=tz).date()
        realized, trades = rows.get(day, (_ZERO, 0))
        rows[day] = (realized + result.realized_pnl, trades + 1)

    return [DailyPnLRow(day=day, realized=realized, trades=trades) for day, (realized, trades) in sorted(rows.items())]
