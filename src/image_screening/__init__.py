"""Public exports for the image screening package."""

from .aggregation import Aggregator, ProbabilityMode
from .detectors import ModelDetector, SkinToneDetector, SubjectDetector
from .errors import ImageDecodeError, InvalidTransitionError, ScreeningError, StageExecutionError
from .pipeline import PipelineController
from .scoring import FeatureScorer, FixedScoringProvider, ScoringProvider, SeededScoringProvider
from .settings import Settings
from .types import (
    DetectionMethod,
    DetectionResult,
    FeatureScore,
    FeatureScores,
    Image,
    PipelinePhase,
    PipelineSnapshot,
    PredictionResult,
    RiskLevel,
)

__all__ = [
    "PipelineController",
    "Aggregator",
    "ProbabilityMode",
    "FeatureScorer",
    "ScoringProvider",
    "SeededScoringProvider",
    "FixedScoringProvider",
    "SubjectDetector",
    "SkinToneDetector",
    "ModelDetector",
    "Settings",
    "ScreeningError",
    "ImageDecodeError",
    "StageExecutionError",
    "InvalidTransitionError",
    "DetectionMethod",
    "DetectionResult",
    "FeatureScore",
    "FeatureScores",
    "Image",
    "PipelinePhase",
    "PipelineSnapshot",
    "PredictionResult",
    "RiskLevel",
]
