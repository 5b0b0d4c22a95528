"""Detector exports."""

from typing import Optional

from ..settings import Settings
from .base import SubjectDetector
from .model import DetectionModel, ModelDetector, threshold_interpretation
from .person import SkinToneDetector
from .yolo import YoloPersonModel


def build_detector(settings: Settings, model: Optional[DetectionModel] = None) -> SubjectDetector:
    """Pick the model strategy when a model is supplied, the heuristic otherwise."""

    if model is None:
        return SkinToneDetector(min_skin_ratio=settings.min_skin_ratio)
    return ModelDetector(model, threshold_interpretation(settings.model_threshold))


__all__ = [
    "SubjectDetector",
    "SkinToneDetector",
    "ModelDetector",
    "DetectionModel",
    "YoloPersonModel",
    "build_detector",
    "threshold_interpretation",
]
