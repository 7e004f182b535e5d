"""Fuse the model prediction with rule strategy signals into one decision.

Weights are dynamic: with a usable model prediction the model carries
``ai_weight`` and the strategies share ``strategy_weight`` equally. When
the prediction is missing, degraded, or ran on too little data, the
strategies carry the full weight (strategy-only mode).

Each component adds ``confidence * weight`` to the score of the direction
it votes for. BUY or SELL wins only when its score is the maximum AND
exceeds ``decision_threshold``; otherwise the decision is HOLD. The
reported confidence is the winning score over the total, clamped to
[min_confidence, max_confidence] (min_confidence when the total is zero).
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from trader.config import FusionSettings
from trader.logging import get_logger
from trader.models import Direction, Signal
from trader.prediction.pipeline import INSUFFICIENT_CANDLES, PredictionResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class FusionComponent:
    """One weighted vote feeding the decision."""

    source: str
    vote: Direction
    weight: float
    score: float

    @property
    def weighted_score(self) -> float:
        return self.score * self.weight


@dataclass
class FinalDecision:
    """Fused trading decision with its full vote breakdown."""

    action: Direction
    confidence: float
    rationale: str
    components: list[FusionComponent] = field(default_factory=list)
    scores: dict[Direction, float] = field(default_factory=dict)
    strategy_only: bool = False

    @property
    def is_actionable(self) -> bool:
        return self.action is not Direction.HOLD


def _usable(prediction: PredictionResult | None) -> bool:
    if prediction is None or prediction.is_degraded:
        return False
    return prediction.reason != INSUFFICIENT_CANDLES


class SignalFusion:
    """Combines model and strategy votes with weighted scoring.

    Args:
        settings: Fusion weights and thresholds.
    """

    def __init__(self, settings: FusionSettings | None = None) -> None:
        self._settings = settings or FusionSettings()

    def fuse(
        self,
        prediction: PredictionResult | None,
        strategy_signals: Sequence[Signal],
    ) -> FinalDecision:
        """Fuse one prediction and any number of strategy signals.

        Args:
            prediction: Pipeline output, or None when no model was asked.
            strategy_signals: Signals from rule strategies.

        Returns:
            FinalDecision with action, clamped confidence and components.
        """
        has_model = _usable(prediction)
        ai_weight = self._settings.ai_weight if has_model else 0.0
        strategy_weight = self._settings.strategy_weight if has_model else 1.0

        components: list[FusionComponent] = []
        if has_model:
            components.append(
                FusionComponent(
                    source=f"AI-{prediction.model_name}",
                    vote=prediction.signal,
                    weight=ai_weight,
                    score=prediction.confidence,
                )
            )

        if strategy_signals:
            share = strategy_weight / len(strategy_signals)
            for signal in strategy_signals:
                components.append(
                    FusionComponent(
                        source=f"Strategy:{signal.source}",
                        vote=signal.direction,
                        weight=share,
                        score=signal.confidence,
                    )
                )

        scores = {direction: 0.0 for direction in (Direction.BUY, Direction.SELL, Direction.HOLD)}
        for component in components:
            scores[component.vote] += component.weighted_score

        action, raw = self._decide(scores)
        total = sum(scores.values())
        normalized = raw / total if total > 0 else self._settings.min_confidence
        confidence = max(self._settings.min_confidence, min(self._settings.max_confidence, normalized))

        decision = FinalDecision(
            action=action,
            confidence=confidence,
            rationale=_rationale(action, scores, components),
            components=components,
            scores=scores,
            strategy_only=not has_model,
        )

        logger.info(
            "signal_fused",
            mode="strategy_only" if not has_model else "ai_active",
            action=action.value,
            confidence=round(confidence, 4),
            components=len(components),
        )
        return decision

    def _decide(self, scores: dict[Direction, float]) -> tuple[Direction, float]:
        buy, sell, hold = scores[Direction.BUY], scores[Direction.SELL], scores[Direction.HOLD]
        top = max(buy, sell, hold)
        threshold = self._settings.decision_threshold

        if top == buy and buy > threshold:
            return Direction.BUY, buy
        if top == sell and sell > threshold:
            return Direction.SELL, sell
        return Direction.HOLD, top


def _rationale(
    action: Direction,
    scores: dict[Direction, float],
    components: list[FusionComponent],
) -> str:
    supporting = [c for c in components if c.vote is action]
    if not supporting:
        return "No clear signals"

    sources = ", ".join(f"{c.source} ({int(c.weighted_score * 100)}%)" for c in supporting)
    return f"{action.value.capitalize()} signal (score: {scores[action]:.2f}) from {sources}"
