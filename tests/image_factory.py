"""Helpers that generate synthetic images for pipeline tests."""

from __future__ import annotations

import io
from typing import Tuple

import cv2
import numpy as np
from PIL import Image as PILImage

from image_screening.types import Image


Color = Tuple[int, int, int]

# RGB colours on either side of the skin-tone rule
SKIN_COLOR: Color = (220, 170, 140)
WHITE: Color = (255, 255, 255)
BLUE: Color = (30, 60, 200)


def create_blank_image(width: int = 320, height: int = 320, color: Color = WHITE) -> np.ndarray:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = color
    return image


def create_skin_image(width: int = 64, height: int = 64) -> np.ndarray:
    return create_blank_image(width, height, SKIN_COLOR)


def create_person_like_image() -> np.ndarray:
    image = create_blank_image(320, 480)
    cv2.circle(image, (160, 150), 70, SKIN_COLOR, -1)
    cv2.rectangle(image, (120, 210), (200, 380), SKIN_COLOR, -1)
    cv2.rectangle(image, (80, 380), (120, 450), SKIN_COLOR, -1)
    cv2.rectangle(image, (200, 380), (240, 450), SKIN_COLOR, -1)
    return image


def create_skin_fraction_image(skin_pixels: int, width: int = 100, height: int = 100) -> np.ndarray:
    """Blank canvas whose first ``skin_pixels`` pixels (row-major) are skin-toned."""

    image = create_blank_image(width, height, BLUE)
    flat = image.reshape(-1, 3)
    flat[:skin_pixels] = SKIN_COLOR
    return image


def encode_png(pixels: np.ndarray, name: str = "synthetic.png") -> Image:
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR))
    assert ok, "PNG encoding failed"
    return Image(data=buffer.tobytes(), name=name)


def encode_with_pillow(pixels: np.ndarray, fmt: str, name: str) -> Image:
    buffer = io.BytesIO()
    pil_image = PILImage.fromarray(pixels)
    if fmt == "GIF":
        pil_image = pil_image.quantize(colors=16)
    pil_image.save(buffer, format=fmt)
    return Image(data=buffer.getvalue(), name=name)


def skin_png(name: str = "skin.png") -> Image:
    return encode_png(create_skin_image(), name)


def blank_png(name: str = "blank.png") -> Image:
    return encode_png(create_blank_image(64, 64), name)


def broken_image(name: str = "broken.png") -> Image:
    return Image(data=b"definitely not an image", name=name)
