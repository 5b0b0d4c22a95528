"""Detection backed by an injected model."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

import numpy as np

from ..image_utils import to_pixel_tensor
from ..types import DetectionMethod, DetectionResult
from .base import SubjectDetector

MODEL_CONFIDENCE = 0.90

Interpretation = Callable[[Any], bool]


class DetectionModel(Protocol):
    """Anything that maps a ``(1, H, W, 3)`` float tensor to a raw prediction."""

    def predict(self, pixel_tensor: np.ndarray) -> Any:
        ...


def threshold_interpretation(threshold: float = 0.5) -> Interpretation:
    """Report a subject when the strongest raw output exceeds ``threshold``."""

    def interpret(raw: Any) -> bool:
        values = np.asarray(raw, dtype=np.float32)
        if values.size == 0:
            return False
        return bool(values.max() > threshold)

    return interpret


class ModelDetector(SubjectDetector):
    """Delegate the presence decision to a model capability."""

    def __init__(
        self,
        model: DetectionModel,
        interpretation: Optional[Interpretation] = None,
    ) -> None:
        super().__init__(DetectionMethod.MODEL)
        self.model = model
        self.interpretation = interpretation or threshold_interpretation()

    def _detect(self, pixels: np.ndarray) -> DetectionResult:
        raw = self.model.predict(to_pixel_tensor(pixels))
        return DetectionResult(
            subject_present=self.interpretation(raw),
            confidence=MODEL_CONFIDENCE,
            method=self.method,
        )
