"""YOLO-backed person model for the model detection strategy."""

from __future__ import annotations

import cv2
import numpy as np

try:
    from ultralytics import YOLO
    YOLO_AVAILABLE = True
except ImportError:
    YOLO_AVAILABLE = False


class YoloPersonModel:
    """Return per-box person confidences from a pre-trained YOLO checkpoint."""

    # COCO class id for "person"
    PERSON_CLASSES = {0}

    def __init__(
        self,
        model_name: str = "yolov8n.pt",
        confidence_threshold: float = 0.25,
        device: str = "cpu",
    ) -> None:
        """
        Initialize the YOLO person model.

        Args:
            model_name: YOLO weights to load (yolov8n.pt, yolov8s.pt, ...)
            confidence_threshold: Minimum box confidence YOLO reports (0-1)
            device: Device to run inference on ('cpu' or 'cuda')
        """
        if not YOLO_AVAILABLE:
            raise ImportError(
                "ultralytics is not installed. Install it with: pip install 'image-screening[yolo]'"
            )

        self.model = YOLO(model_name)
        self.confidence_threshold = confidence_threshold
        self.device = device

    def predict(self, pixel_tensor: np.ndarray) -> np.ndarray:
        """
        Run YOLO on a ``(1, H, W, 3)`` RGB tensor scaled to [0, 1].

        Returns:
            1-D array with the confidence of every person box, empty when none
        """
        frame = (np.clip(pixel_tensor[0], 0.0, 1.0) * 255).astype(np.uint8)
        frame = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)

        results = self.model(
            frame,
            conf=self.confidence_threshold,
            device=self.device,
            verbose=False,
        )
        if not results or results[0].boxes is None:
            return np.zeros(0, dtype=np.float32)

        confidences = [
            float(box.conf[0])
            for box in results[0].boxes
            if int(box.cls[0]) in self.PERSON_CLASSES
        ]
        return np.asarray(confidences, dtype=np.float32)
