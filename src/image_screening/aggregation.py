"""Aggregation and classification of feature scores."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional, Tuple

from .errors import StageExecutionError
from .scoring import FEATURE_SPECS
from .types import (
    ClassProbabilities,
    FeatureScore,
    FeatureScores,
    PredictionResult,
    RiskLevel,
)

logger = logging.getLogger(__name__)

MODERATE_RISK_THRESHOLD = 0.30
ESCALATION_THRESHOLD = 0.40
MONITORING_THRESHOLD = 0.20

# Derived target probability spans the same range the placeholder model draws from,
# rescaled from the overall scores the feature ranges can actually produce.
DERIVED_PROBABILITY_FLOOR = 0.10
DERIVED_PROBABILITY_SPAN = 0.40
MIN_OVERALL_SCORE = sum(spec.low * spec.weight for spec in FEATURE_SPECS)

ESCALATION_RECOMMENDATIONS: Tuple[str, ...] = (
    "Consider consulting with a developmental pediatrician",
    "Schedule a comprehensive evaluation with autism specialists",
    "Begin early intervention services if recommended",
)
MONITORING_RECOMMENDATIONS: Tuple[str, ...] = (
    "Monitor developmental milestones closely",
    "Consider screening with standardized tools",
    "Discuss concerns with your pediatrician",
)
ROUTINE_RECOMMENDATIONS: Tuple[str, ...] = (
    "Continue regular developmental monitoring",
    "Maintain routine pediatric check-ups",
    "No immediate concerns detected",
)


class ProbabilityMode(str, Enum):
    """How the target-class probability is obtained.

    ``DERIVED`` maps the overall score monotonically onto the probability.
    ``INDEPENDENT`` takes the value the scoring provider drew, unrelated to
    the overall score.
    """

    DERIVED = "derived"
    INDEPENDENT = "independent"


def weighted_sum(features: Iterable[FeatureScore]) -> float:
    """Unnormalized weighted sum of feature scores, clamped to [0, 1]."""

    total = sum(feature.score * feature.weight for feature in features)
    return float(min(1.0, max(0.0, total)))


def derive_target_probability(overall_score: float) -> float:
    position = max(0.0, overall_score - MIN_OVERALL_SCORE) / (1.0 - MIN_OVERALL_SCORE)
    return DERIVED_PROBABILITY_FLOOR + DERIVED_PROBABILITY_SPAN * min(1.0, position)


def classify_risk(probability: float, high_threshold: Optional[float] = None) -> RiskLevel:
    if high_threshold is not None and probability > high_threshold:
        return RiskLevel.HIGH
    if probability > MODERATE_RISK_THRESHOLD:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def select_recommendations(probability: float) -> Tuple[str, ...]:
    if probability > ESCALATION_THRESHOLD:
        return ESCALATION_RECOMMENDATIONS
    if probability > MONITORING_THRESHOLD:
        return MONITORING_RECOMMENDATIONS
    return ROUTINE_RECOMMENDATIONS


class Aggregator:
    """Combine feature scores into a ``PredictionResult``."""

    stage = "aggregation"

    def __init__(
        self,
        probability_mode: ProbabilityMode = ProbabilityMode.DERIVED,
        high_risk_threshold: Optional[float] = None,
    ) -> None:
        self.probability_mode = ProbabilityMode(probability_mode)
        self.high_risk_threshold = high_risk_threshold

    def aggregate(self, scores: FeatureScores) -> PredictionResult:
        overall_score = weighted_sum(scores.features)
        target = self._target_probability(scores, overall_score)
        risk_level = classify_risk(target, self.high_risk_threshold)
        logger.debug(
            "overall=%.3f target=%.3f risk=%s (%s)",
            overall_score,
            target,
            risk_level.value,
            self.probability_mode.value,
        )
        return PredictionResult(
            class_probabilities=ClassProbabilities.from_target(target),
            overall_score=overall_score,
            confidence=scores.confidence,
            features=tuple(scores.features),
            risk_level=risk_level,
            recommendations=select_recommendations(target),
        )

    def _target_probability(self, scores: FeatureScores, overall_score: float) -> float:
        if self.probability_mode is ProbabilityMode.DERIVED:
            return derive_target_probability(overall_score)
        if scores.target_probability is None:
            raise StageExecutionError(self.stage, "independent mode needs a target probability")
        return scores.target_probability
