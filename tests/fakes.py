"""Fixed-output stand-ins for pipeline stages."""

from __future__ import annotations

from typing import Optional

from image_screening.scoring import FEATURE_SPECS
from image_screening.types import FeatureScore, FeatureScores, Image


class FixedScorer:
    """Scorer fake returning one prepared ``FeatureScores`` bundle."""

    def __init__(self, target_probability: Optional[float], score: float = 0.5) -> None:
        self.calls = 0
        self.result = FeatureScores(
            features=tuple(
                FeatureScore(name=spec.name, score=score, weight=spec.weight)
                for spec in FEATURE_SPECS
            ),
            confidence=0.8,
            target_probability=target_probability,
        )

    def score(self, image: Image) -> FeatureScores:
        self.calls += 1
        return self.result
