"""Per-account trading session wiring the decision and execution engine.

Flow per cycle:
1. decide: prediction pipeline + rule strategies -> SignalFusion
2. plan_order: risk gate, default SL/TP, position size
3. execute: hand the plan to the order execution collaborator
4. on_fill: ledger update, realized P&L into risk and P&L trackers

Each session owns its RiskManager, PositionLedger and PnLTracker. Share a
session across concurrent writers only behind external serialization.
"""

import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from trader.config import AppSettings
from trader.exceptions import RiskLimitExceeded
from trader.features.builder import FeatureBuilder
from trader.logging import get_logger, order_context
from trader.models import Candle, Direction, Fill, Horizon, OrderSide, PnLSnapshot, PredictionMode
from trader.pnl.tracker import PnLTracker
from trader.position.ledger import FillResult, PositionLedger
from trader.prediction.fusion import FinalDecision, SignalFusion
from trader.prediction.pipeline import PredictionPipeline
from trader.prediction.scorer import ModelScorer
from trader.risk.manager import RiskManager, to_decimal
from trader.strategies import Strategy, default_strategies

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderPlan:
    """Risk-approved order ready for submission."""

    symbol: str
    side: OrderSide
    quantity: Decimal
    entry: Decimal
    stop_loss: Decimal
    take_profit: Decimal
    confidence: float


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one submission: the booked fill, or the collaborator error."""

    plan: OrderPlan
    fill_result: FillResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TradingSession:
    """Owns one account's engine components.

    Args:
        settings: Application settings. Defaults to AppSettings().
        scorers: Per-horizon model scorers. Empty means every real
            prediction degrades and fusion runs strategy-only.
        strategies: Rule strategies. Defaults to all built-ins.
        clock: Time source for P&L snapshots.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        scorers: Mapping[Horizon, ModelScorer] | None = None,
        strategies: Sequence[Strategy] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or AppSettings()
        self.risk = RiskManager(self._settings.risk)
        self.ledger = PositionLedger()
        self.pnl = PnLTracker(clock=clock)
        self.pipeline = PredictionPipeline(
            scorers or {},
            settings=self._settings.prediction,
            feature_builder=FeatureBuilder(self._settings.features),
        )
        self.fusion = SignalFusion(self._settings.fusion)
        self.strategies = (
            list(strategies) if strategies is not None else default_strategies(self._settings.strategies)
        )

    def decide(
        self,
        candles: Sequence[Candle],
        horizon: Horizon | str = Horizon.M5,
        mode: PredictionMode = PredictionMode.NORMAL,
        demo: bool = False,
    ) -> FinalDecision:
        """Fuse the model prediction with every strategy's signal."""
        prediction = self.pipeline.predict(candles, horizon=horizon, mode=mode, demo=demo)
        signals = [strategy.signal(candles) for strategy in self.strategies]
        return self.fusion.fuse(prediction, signals)

    def plan_order(
        self,
        decision: FinalDecision,
        symbol: str,
        equity: Decimal | float,
        entry: Decimal | float,
    ) -> OrderPlan | None:
        """Turn a decision into a sized order with default SL/TP.

        Returns:
            OrderPlan, or None for HOLD, a closed risk gate, or a zero size.
        """
        if decision.action is Direction.HOLD:
            return None
        if not self.risk.can_trade(equity):
            logger.info("order_blocked_daily_loss", symbol=symbol, action=decision.action.value)
            return None

        side = OrderSide.BUY if decision.action is Direction.BUY else OrderSide.SELL
        entry = to_decimal(entry)
        stop_loss = self.risk.default_sl(entry, side)
        quantity = self.risk.position_size(equity, entry, stop_loss)
        if quantity <= 0:
            return None

        return OrderPlan(
            symbol=symbol,
            side=side,
            quantity=quantity,
            entry=entry,
            stop_loss=stop_loss,
            take_profit=self.risk.default_tp(entry, side),
            confidence=decision.confidence,
        )

    def execute(
        self,
        decision: FinalDecision,
        symbol: str,
        equity: Decimal | float,
        entry: Decimal | float,
        submit: Callable[[OrderPlan], Fill],
    ) -> ExecutionResult | None:
        """Plan, submit and book an order.

        Args:
            submit: Order execution collaborator returning the Fill.

        Returns:
            ExecutionResult, or None when the decision yields no order. A
            submit failure comes back with ``error`` set and leaves the
            ledger untouched.

        Raises:
            RiskLimitExceeded: If the daily loss gate is closed.
        """
        if not self.risk.can_trade(equity):
            raise RiskLimitExceeded(
                f"Daily loss limit reached (realized today {self.risk.daily_realized})"
            )

        plan = self.plan_order(decision, symbol, equity, entry)
        if plan is None:
            return None

        with order_context(symbol=plan.symbol, side=plan.side.value):
            logger.info("order_submitted", quantity=str(plan.quantity), entry=str(plan.entry))
            try:
                fill = submit(plan)
            except Exception as e:
                logger.error("order_rejected", error=str(e))
                return ExecutionResult(plan=plan, error=str(e))
            return ExecutionResult(plan=plan, fill_result=self.on_fill(fill, equity))

    def on_fill(self, fill: Fill, equity: Decimal | float) -> FillResult:
        """Book a fill and record its realized P&L for risk and display."""
        result = self.ledger.apply(fill)
        self.risk.record(result.realized_pnl, equity)
        self.pnl.add_realized(result.realized_pnl)
        return result

    def snapshot(
        self,
        symbol: str,
        mark_price: Decimal | float,
        base_equity: Decimal | float,
    ) -> PnLSnapshot:
        return self.pnl.snapshot(mark_price, self.ledger.position(symbol), base_equity)

    def reset_day(self) -> None:
        """Day rollover: reopen the risk gate and zero realized-today."""
        self.risk.reset_day()
        self.pnl.reset_day()
