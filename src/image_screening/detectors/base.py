"""Base detector definitions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from ..errors import ImageDecodeError
from ..image_utils import decode_image
from ..types import DetectionMethod, DetectionResult, Image

logger = logging.getLogger(__name__)


class SubjectDetector(ABC):
    """Decide whether a qualifying subject is present in an image.

    ``detect`` never raises: decoding problems and unexpected faults inside a
    strategy are reported through ``DetectionResult.error``.
    """

    method: DetectionMethod

    def __init__(self, method: DetectionMethod) -> None:
        self.method = method

    def detect(self, image: Image) -> DetectionResult:
        try:
            pixels = decode_image(image)
            return self._detect(pixels)
        except ImageDecodeError as exc:
            logger.warning("Could not decode %s: %s", image.name, exc)
            return self._failed(f"image decode failed: {exc}")
        except Exception as exc:
            logger.warning("%s detection failed for %s: %s", self.method.value, image.name, exc)
            return self._failed(f"detection failed: {exc}")

    @abstractmethod
    def _detect(self, pixels: np.ndarray) -> DetectionResult:
        """Classify an RGB pixel buffer."""

    def _failed(self, message: str) -> DetectionResult:
        return DetectionResult(
            subject_present=False,
            confidence=0.0,
            method=self.method,
            error=message,
        )
