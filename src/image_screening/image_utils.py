"""Utility helpers for image decoding and preprocessing."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from .errors import ImageDecodeError
from .types import Image


def decode_image(image: Image) -> np.ndarray:
    """Decode an encoded image payload into an RGB ``uint8`` ndarray.

    Pillow is used rather than ``cv2.imdecode`` because OpenCV cannot read GIF.
    Only the first frame of animated formats is used.
    """

    if not image.data:
        raise ImageDecodeError(f"{image.name}: empty image payload")
    try:
        with PILImage.open(io.BytesIO(image.data)) as pil_image:
            pixels = np.array(pil_image.convert("RGB"))
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"{image.name}: {exc}") from exc
    return pixels


def to_pixel_tensor(pixels: np.ndarray) -> np.ndarray:
    """Scale pixels to ``[0, 1]`` floats with a leading batch axis."""

    return (pixels.astype(np.float32) / 255.0)[np.newaxis, ...]
