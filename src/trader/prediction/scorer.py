"""Abstract model scorer interface.

A ModelScorer wraps one pretrained per-horizon classifier. The pipeline
depends ONLY on this interface; the model runtime itself (loading, caching,
hardware dispatch) lives behind it and is never imported by the engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from trader.models import Direction, FeatureVector

# Class distribution over {buy, sell, hold}: either a mapping keyed by
# Direction (or its value string) or 3 values ordered [buy, sell, hold].
Distribution = Mapping[Direction | str, float] | Iterable[float]

SEQUENCE_ORDER: tuple[Direction, ...] = (Direction.BUY, Direction.SELL, Direction.HOLD)


class ModelScorer(ABC):
    """Abstract base class for model scorers.

    Implementations may be slow or fail; any exception raised from
    ``score`` is treated by the pipeline as a collaborator failure.
    """

    @abstractmethod
    def score(self, features: FeatureVector) -> Distribution:
        """Score a feature vector.

        Args:
            features: Normalized feature vector (10 finite floats).

        Returns:
            Class distribution over buy/sell/hold.

        Raises:
            ScorerError: If the model is unavailable or inference fails.
        """
        ...
