"""Model scoring, the prediction fallback chain and signal fusion."""

from trader.prediction.fusion import FinalDecision, FusionComponent, SignalFusion
from trader.prediction.pipeline import (
    DEMO_MODEL_NAME,
    ENSEMBLE_MODEL_NAME,
    PredictionPipeline,
    PredictionResult,
    ResultStatus,
    argmax_direction,
    parse_distribution,
)
from trader.prediction.scorer import Distribution, ModelScorer

__all__ = [
    "DEMO_MODEL_NAME",
    "ENSEMBLE_MODEL_NAME",
    "Distribution",
    "FinalDecision",
    "FusionComponent",
    "ModelScorer",
    "PredictionPipeline",
    "PredictionResult",
    "ResultStatus",
    "SignalFusion",
    "argmax_direction",
    "parse_distribution",
]
