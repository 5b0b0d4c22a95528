"""Feature scoring stage.

The four features and their weights are fixed. Each value comes from a
``ScoringProvider`` so the numbers can be backed by real sub-models, by a
deterministic placeholder, or by fixed values in tests.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from .errors import StageExecutionError
from .types import FeatureScore, FeatureScores, Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureSpec:
    name: str
    weight: float
    low: float
    high: float = 1.0


FEATURE_SPECS: Tuple[FeatureSpec, ...] = (
    FeatureSpec("Eye Contact Patterns", 0.25, 0.2),
    FeatureSpec("Facial Expression Analysis", 0.20, 0.3),
    FeatureSpec("Social Interaction Cues", 0.25, 0.4),
    FeatureSpec("Behavioral Patterns", 0.30, 0.2),
)

TARGET_PROBABILITY_KEY = "target_probability"
TARGET_PROBABILITY_RANGE = (0.10, 0.50)
CONFIDENCE_KEY = "confidence"
CONFIDENCE_RANGE = (0.70, 1.00)


class ScoringProvider(ABC):
    """Capability that produces one bounded value per named output."""

    @abstractmethod
    def draw(self, image: Image, key: str, low: float, high: float) -> float:
        """Return a value in ``[low, high]`` for ``key`` on ``image``."""


class SeededScoringProvider(ScoringProvider):
    """Deterministic placeholder: values are seeded by the image content.

    The same bytes always produce the same values, so repeated runs over one
    image are reproducible.
    """

    def __init__(self, salt: str = "") -> None:
        self.salt = salt

    def draw(self, image: Image, key: str, low: float, high: float) -> float:
        digest = hashlib.sha256(image.data + f"|{self.salt}|{key}".encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
        return float(low + rng.random() * (high - low))


class FixedScoringProvider(ScoringProvider):
    """Return configured values regardless of the image.

    Values outside the requested range are clamped, or rejected when
    ``strict`` is set. Keys without a value fall back to ``default`` and, if
    that is ``None`` too, raise ``KeyError``.
    """

    def __init__(
        self,
        values: Mapping[str, float],
        default: Optional[float] = None,
        strict: bool = False,
    ) -> None:
        self.values: Dict[str, float] = dict(values)
        self.default = default
        self.strict = strict

    def draw(self, image: Image, key: str, low: float, high: float) -> float:
        value = self.values.get(key, self.default)
        if value is None:
            raise KeyError(key)
        if low <= value <= high:
            return float(value)
        if self.strict:
            raise ValueError(f"{key}={value} outside [{low}, {high}]")
        return float(min(high, max(low, value)))


class FeatureScorer:
    """Compute the fixed, ordered feature set for an image.

    The target-class probability is only drawn when ``draw_target_probability``
    is set; an aggregator that derives it from the overall score does not need it.
    """

    stage = "scoring"

    def __init__(
        self,
        provider: Optional[ScoringProvider] = None,
        draw_target_probability: bool = True,
    ) -> None:
        self.provider = provider or SeededScoringProvider()
        self.draw_target_probability = draw_target_probability

    def score(self, image: Image) -> FeatureScores:
        try:
            features = tuple(
                FeatureScore(
                    name=spec.name,
                    score=self._draw(image, spec.name, spec.low, spec.high),
                    weight=spec.weight,
                )
                for spec in FEATURE_SPECS
            )
            confidence = self._draw(image, CONFIDENCE_KEY, *CONFIDENCE_RANGE)
            target_probability = None
            if self.draw_target_probability:
                target_probability = self._draw(image, TARGET_PROBABILITY_KEY, *TARGET_PROBABILITY_RANGE)
        except StageExecutionError:
            raise
        except Exception as exc:
            raise StageExecutionError(self.stage, f"{image.name}: {exc}") from exc

        logger.debug(
            "Scored %s: %s",
            image.name,
            ", ".join(f"{feature.name}={feature.score:.3f}" for feature in features),
        )
        return FeatureScores(
            features=features,
            confidence=confidence,
            target_probability=target_probability,
        )

    def _draw(self, image: Image, key: str, low: float, high: float) -> float:
        value = float(self.provider.draw(image, key, low, high))
        if not low <= value <= high:
            raise StageExecutionError(
                self.stage, f"provider returned {key}={value}, expected [{low}, {high}]"
            )
        return value
