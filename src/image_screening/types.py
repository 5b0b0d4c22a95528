"""Common types used throughout the screening pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

PROBABILITY_TOLERANCE = 1e-6


class DetectionMethod(str, Enum):
    """Which detection strategy produced a result."""

    HEURISTIC = "heuristic"
    MODEL = "model"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class PipelinePhase(str, Enum):
    """Phases of a single pipeline run."""

    IDLE = "idle"
    IMAGE_LOADED = "image_loaded"
    DETECTING = "detecting"
    DETECTED_POSITIVE = "detected_positive"
    DETECTED_NEGATIVE = "detected_negative"
    SCORING = "scoring"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class Image:
    """Encoded image payload accepted into the pipeline."""

    data: bytes
    name: str

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Image":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image path not found: {path}")
        return cls(data=path.read_bytes(), name=path.name)


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of the subject detection stage."""

    subject_present: bool
    confidence: float
    method: DetectionMethod
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FeatureScore:
    """One named, weighted sub-signal of the overall score."""

    name: str
    score: float
    weight: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"{self.name}: score {self.score} outside [0, 1]")
        if self.weight <= 0.0:
            raise ValueError(f"{self.name}: weight must be positive, got {self.weight}")


@dataclass(frozen=True)
class FeatureScores:
    """Everything the scoring stage produces for one image.

    ``confidence`` and ``target_probability`` are the model-side outputs that
    accompany the feature scores. ``target_probability`` is ``None`` when the
    scorer was told not to draw it because the aggregator derives it from the
    overall score.
    """

    features: Tuple[FeatureScore, ...]
    confidence: float
    target_probability: Optional[float] = None


@dataclass(frozen=True)
class ClassProbabilities:
    target: float
    baseline: float

    def __post_init__(self) -> None:
        if abs(self.target + self.baseline - 1.0) > PROBABILITY_TOLERANCE:
            raise ValueError(
                f"class probabilities must sum to 1.0, got {self.target + self.baseline}"
            )

    @classmethod
    def from_target(cls, target: float) -> "ClassProbabilities":
        return cls(target=target, baseline=1.0 - target)


@dataclass(frozen=True)
class PredictionResult:
    """Final output of the aggregation stage."""

    class_probabilities: ClassProbabilities
    overall_score: float
    confidence: float
    features: Tuple[FeatureScore, ...]
    risk_level: RiskLevel
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_probabilities": {
                "target": self.class_probabilities.target,
                "baseline": self.class_probabilities.baseline,
            },
            "overall_score": self.overall_score,
            "confidence": self.confidence,
            "features": [
                {"name": feature.name, "score": feature.score, "weight": feature.weight}
                for feature in self.features
            ],
            "risk_level": self.risk_level.value,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class PipelineSnapshot:
    """Read model of a controller at one point in time."""

    phase: PipelinePhase
    generation: int
    image_name: Optional[str] = None
    detection: Optional[DetectionResult] = None
    prediction: Optional[PredictionResult] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        detection: Optional[Dict[str, Any]] = None
        if self.detection is not None:
            detection = {
                "subject_present": self.detection.subject_present,
                "confidence": self.detection.confidence,
                "method": self.detection.method.value,
                "error": self.detection.error,
            }
        return {
            "phase": self.phase.value,
            "image": self.image_name,
            "detection": detection,
            "prediction": self.prediction.to_dict() if self.prediction else None,
            "error": self.error,
        }


ImageLike = Union[Image, str, Path]


def as_image(value: ImageLike) -> Image:
    """Accept an ``Image`` or a filesystem path."""

    if isinstance(value, Image):
        return value
    return Image.from_path(value)

