"""Person detection using a fixed skin-tone color rule."""

from __future__ import annotations

import cv2
import numpy as np

from ..types import DetectionMethod, DetectionResult
from .base import SubjectDetector

POSITIVE_CONFIDENCE = 0.85
NEGATIVE_CONFIDENCE = 0.15


class SkinToneDetector(SubjectDetector):
    """Detect human presence from the share of skin-toned pixels."""

    def __init__(self, min_skin_ratio: float = 0.10) -> None:
        super().__init__(DetectionMethod.HEURISTIC)
        self.min_skin_ratio = min_skin_ratio

    def _detect(self, pixels: np.ndarray) -> DetectionResult:
        skin_ratio = self.skin_ratio(pixels)
        present = skin_ratio > self.min_skin_ratio
        return DetectionResult(
            subject_present=present,
            confidence=POSITIVE_CONFIDENCE if present else NEGATIVE_CONFIDENCE,
            method=self.method,
            details={"skin_ratio": skin_ratio},
        )

    @classmethod
    def skin_ratio(cls, pixels: np.ndarray) -> float:
        total_pixels = pixels.shape[0] * pixels.shape[1]
        if total_pixels == 0:
            return 0.0
        return float(cv2.countNonZero(cls._skin_mask(pixels)) / total_pixels)

    @staticmethod
    def _skin_mask(pixels: np.ndarray) -> np.ndarray:
        # int16 so channel differences cannot wrap around
        rgb = pixels[..., :3].astype(np.int16)
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        spread = rgb.max(axis=-1) - rgb.min(axis=-1)
        mask = (
            (r > 95)
            & (g > 40)
            & (b > 20)
            & (spread > 15)
            & (np.abs(r - g) > 15)
            & (r > g)
            & (r > b)
        )
        return mask.astype(np.uint8) * 255
