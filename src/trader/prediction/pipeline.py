"""Multi-horizon prediction pipeline with a fallback chain.

Each request walks the chain in strict order:
1. Insufficient data -> HOLD/0, reason "insufficient_candles" (terminal)
2. Demo mode -> bounded pseudo-random signal tagged "DEMO" (terminal)
3. NORMAL mode -> one scorer for the requested horizon, argmax
4. PRECISION mode -> every configured scorer votes, majority wins, tie -> HOLD
5. Scorer failure -> degraded HOLD/0 with meta["error"]

The pipeline holds no per-request state, so a failed call never poisons
later ones. Only demo mode draws from the random generator.
"""

import math
import random
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from trader.config import PredictionSettings
from trader.exceptions import InsufficientDataError, ScorerError
from trader.features.builder import FeatureBuilder
from trader.logging import get_logger
from trader.models import Candle, Direction, FeatureVector, Horizon, PredictionMode, Signal
from trader.prediction.scorer import SEQUENCE_ORDER, Distribution, ModelScorer

logger = get_logger(__name__)

INSUFFICIENT_CANDLES = "insufficient_candles"
DEMO_MODEL_NAME = "DEMO"
ENSEMBLE_MODEL_NAME = "Ensemble"

# Named-model demo confidences lie in [0.6, 0.9]; generic demo in (0.5, 1.0).
NAMED_DEMO_RANGE = (0.6, 0.9)
GENERIC_DEMO_RANGE = (0.51, 0.99)
ENSEMBLE_TIE_CONFIDENCE = 0.5


class ResultStatus(str, Enum):
    """Whether a prediction came from a healthy path or a fallback."""

    OK = "ok"
    DEGRADED = "degraded"


@dataclass
class PredictionResult:
    """Outcome of one prediction request.

    ``status`` is DEGRADED whenever a scorer failed; ``meta["error"]``
    then explains why.
    """

    signal: Direction
    confidence: float
    model_name: str
    reason: str = ""
    status: ResultStatus = ResultStatus.OK
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_degraded(self) -> bool:
        return self.status is ResultStatus.DEGRADED

    def to_signal(self) -> Signal:
        """Convert into a Signal sourced from the model name."""
        return Signal(
            direction=self.signal,
            confidence=self.confidence,
            reason=self.reason,
            source=self.model_name,
        )


def parse_distribution(distribution: Distribution) -> dict[Direction, float]:
    """Normalize a scorer's raw output into {Direction: probability}.

    Accepts a label mapping or any iterable of three probabilities in
    (buy, sell, hold) order, such as a list or a 1-D array.
    Non-finite or negative probabilities count as 0.

    Raises:
        ScorerError: If the output has an unknown label or wrong shape.
    """
    probabilities = {direction: 0.0 for direction in SEQUENCE_ORDER}

    if isinstance(distribution, Mapping):
        items = list(distribution.items())
    elif isinstance(distribution, Iterable) and not isinstance(distribution, (str, bytes)):
        values = list(distribution)
        if len(values) != len(SEQUENCE_ORDER):
            raise ScorerError(
                f"expected {len(SEQUENCE_ORDER)} class probabilities, got {len(values)}"
            )
        items = list(zip(SEQUENCE_ORDER, values))
    else:
        raise ScorerError(f"unsupported distribution type: {type(distribution).__name__}")

    for label, value in items:
        try:
            direction = Direction(label.lower() if isinstance(label, str) else label)
        except ValueError:
            raise ScorerError(f"unknown class label: {label!r}") from None
        try:
            probability = float(value)
        except (TypeError, ValueError):
            raise ScorerError(f"non-numeric probability for {direction.value}: {value!r}") from None
        if not math.isfinite(probability) or probability < 0:
            probability = 0.0
        probabilities[direction] = probability

    return probabilities


def argmax_direction(probabilities: Mapping[Direction, float]) -> tuple[Direction, float]:
    """Pick the winning class.

    An all-zero distribution is HOLD/0. A tie for the top probability
    resolves to HOLD at that probability.
    """
    top = max(probabilities.values(), default=0.0)
    if top <= 0:
        return Direction.HOLD, 0.0
    winners = [d for d, p in probabilities.items() if p == top]
    if len(winners) > 1:
        return Direction.HOLD, top
    return winners[0], top


def _resolve_horizon(horizon: Horizon | str) -> Horizon | None:
    try:
        return Horizon(horizon)
    except ValueError:
        return None


class PredictionPipeline:
    """Orchestrates feature building and per-horizon model scoring.

    Args:
        scorers: Mapping of horizon to its model scorer. Horizons without
            a scorer are treated as unavailable models.
        settings: Prediction settings (minimum window, horizons, demo seed).
        feature_builder: Builds the feature vector. Defaults to a
            FeatureBuilder with default settings.
        rng: Random generator used only by demo mode. Defaults to one
            seeded from settings.demo_seed.
    """

    def __init__(
        self,
        scorers: Mapping[Horizon, ModelScorer],
        settings: PredictionSettings | None = None,
        feature_builder: FeatureBuilder | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or PredictionSettings()
        self._scorers = dict(scorers)
        self._feature_builder = feature_builder or FeatureBuilder()
        self._rng = rng or random.Random(self._settings.demo_seed)
        self._horizons = [
            h for h in (_resolve_horizon(raw) for raw in self._settings.horizons) if h is not None
        ]

    @property
    def min_candles(self) -> int:
        return self._settings.min_candles

    @property
    def horizons(self) -> list[Horizon]:
        """Horizons polled in precision mode, in configured order."""
        return list(self._horizons)

    def predict(
        self,
        candles: Sequence[Candle],
        horizon: Horizon | str = Horizon.M5,
        mode: PredictionMode = PredictionMode.NORMAL,
        demo: bool = False,
    ) -> PredictionResult:
        """Produce a prediction for the candle window.

        Args:
            candles: Candles ordered ascending by open_time.
            horizon: Horizon whose model answers in NORMAL mode.
            mode: NORMAL (single model) or PRECISION (ensemble vote).
            demo: Bypass real scoring and return a bounded random signal.

        Returns:
            PredictionResult. Never raises for data or scorer problems.
        """
        if len(candles) < self.min_candles:
            return self._insufficient(len(candles), self.min_candles)

        if demo:
            return self._demo(horizon, mode)

        try:
            features = self._feature_builder.build(candles)
        except InsufficientDataError as e:
            return self._insufficient(e.available, e.required)

        if mode is PredictionMode.PRECISION:
            return self._ensemble(features)
        return self._single(features, horizon)

    def _insufficient(self, available: int, required: int) -> PredictionResult:
        logger.debug("prediction_insufficient_data", available=available, required=required)
        return PredictionResult(
            signal=Direction.HOLD,
            confidence=0.0,
            model_name="",
            reason=INSUFFICIENT_CANDLES,
            meta={"required": required, "available": available},
        )

    def _demo(self, horizon: Horizon | str, mode: PredictionMode) -> PredictionResult:
        named = mode is PredictionMode.NORMAL and _resolve_horizon(horizon) is not None
        low, high = NAMED_DEMO_RANGE if named else GENERIC_DEMO_RANGE
        direction = self._rng.choice(SEQUENCE_ORDER)
        confidence = self._rng.uniform(low, high)
        meta: dict[str, Any] = {"demo": "named" if named else "generic"}
        if named:
            meta["horizon"] = Horizon(horizon).value
        return PredictionResult(
            signal=direction,
            confidence=confidence,
            model_name=DEMO_MODEL_NAME,
            reason="demo_mode",
            meta=meta,
        )

    def _score(self, horizon: Horizon, features: FeatureVector) -> tuple[Direction, float]:
        """Run one scorer. Raises ScorerError on any scorer-side failure."""
        scorer = self._scorers.get(horizon)
        if scorer is None:
            raise ScorerError(f"no model configured for horizon {horizon.value}")
        try:
            raw = scorer.score(features)
        except ScorerError:
            raise
        except Exception as e:
            raise ScorerError(f"{type(e).__name__}: {e}") from e
        return argmax_direction(parse_distribution(raw))

    def _degraded(self, model_name: str, error: str, **meta: Any) -> PredictionResult:
        return PredictionResult(
            signal=Direction.HOLD,
            confidence=0.0,
            model_name=model_name,
            reason="scorer_failed",
            status=ResultStatus.DEGRADED,
            meta={"error": error, **meta},
        )

    def _single(self, features: FeatureVector, horizon: Horizon | str) -> PredictionResult:
        resolved = _resolve_horizon(horizon)
        if resolved is None:
            logger.warning("scorer_failed", horizon=str(horizon), error="unknown horizon")
            return self._degraded(str(horizon), f"unknown horizon {horizon!r}")

        model_name = resolved.name
        try:
            direction, confidence = self._score(resolved, features)
        except ScorerError as e:
            logger.warning("scorer_failed", horizon=resolved.value, error=str(e))
            return self._degraded(model_name, str(e), horizon=resolved.value)

        return PredictionResult(
            signal=direction,
            confidence=confidence,
            model_name=model_name,
            reason=f"{model_name} model argmax",
            meta={"horizon": resolved.value},
        )

    def _ensemble(self, features: FeatureVector) -> PredictionResult:
        votes: dict[Horizon, tuple[Direction, float]] = {}
        errors: dict[str, str] = {}
        for horizon in self._horizons:
            try:
                votes[horizon] = self._score(horizon, features)
            except ScorerError as e:
                logger.warning("scorer_failed", horizon=horizon.value, error=str(e))
                errors[horizon.value] = str(e)

        consulted = [h.value for h in self._horizons]
        if not votes:
            return self._degraded(
                ENSEMBLE_MODEL_NAME,
                "all ensemble scorers failed",
                models=consulted,
                errors=errors,
            )

        counts = Counter(direction for direction, _ in votes.values())
        ranked = counts.most_common()
        top_count = ranked[0][1]
        leaders = [direction for direction, count in ranked if count == top_count]

        if len(leaders) > 1:
            direction, confidence = Direction.HOLD, ENSEMBLE_TIE_CONFIDENCE
            reason = "ensemble tie"
        else:
            direction = leaders[0]
            agreeing = [c for d, c in votes.values() if d is direction]
            confidence = sum(agreeing) / len(agreeing)
            reason = f"ensemble majority {top_count}/{len(votes)}"

        meta: dict[str, Any] = {
            "models": consulted,
            "votes": {h.value: d.value for h, (d, _) in votes.items()},
        }
        if errors:
            meta["errors"] = errors

        logger.debug(
            "ensemble_resolved",
            direction=direction.value,
            confidence=confidence,
            votes=meta["votes"],
        )
        return PredictionResult(
            signal=direction,
            confidence=confidence,
            model_name=ENSEMBLE_MODEL_NAME,
            reason=reason,
            meta=meta,
        )
