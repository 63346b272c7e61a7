"""Pixel buffers and PNG input/output.

The rotation pipeline only sees :class:`RgbaImage`, a float RGBA array. Pillow
is confined to :func:`load_image` and :func:`save_png`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

Rgba = Tuple[float, float, float, float]

_WIDE_GREY_MODES = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})


class ImageIOError(RuntimeError):
    """Raised when an image cannot be decoded or encoded."""


@dataclass
class RgbaImage:
    """Float32 pixel buffer of shape ``(height, width, 4)`` with values in ``[0, 1]``."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels, dtype=np.float32)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(
                f"RgbaImage expects a (height, width, 4) array, got shape {pixels.shape}"
            )
        self.pixels = pixels

    @classmethod
    def blank(
        cls, width: int, height: int, fill: Sequence[float] = (0.0, 0.0, 0.0, 1.0)
    ) -> "RgbaImage":
        pixels = np.empty((height, width, 4), dtype=np.float32)
        pixels[...] = np.asarray(fill, dtype=np.float32)
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> Rgba:
        r, g, b, a = self.pixels[y, x]
        return float(r), float(g), float(b), float(a)

    def set_pixel(self, x: int, y: int, rgba: Sequence[float]) -> None:
        self.pixels[y, x] = np.clip(np.asarray(rgba, dtype=np.float32), 0.0, 1.0)

    def copy(self) -> "RgbaImage":
        return RgbaImage(self.pixels.copy())


def from_pil(image: Image.Image) -> RgbaImage:
    """Convert a Pillow image of any mode into an :class:`RgbaImage`.

    16-bit greyscale (``I;16*`` and PNG-style ``I``) keeps its full range;
    Pillow's own ``convert("RGBA")`` would saturate those samples at 255.
    """
    if image.mode in _WIDE_GREY_MODES:
        grey = np.clip(np.asarray(image, dtype=np.float32) / 65535.0, 0.0, 1.0)
        pixels = np.empty(grey.shape + (4,), dtype=np.float32)
        pixels[..., :3] = grey[..., np.newaxis]
        pixels[..., 3] = 1.0
        return RgbaImage(pixels)

    rgba = image.convert("RGBA")
    return RgbaImage(np.asarray(rgba, dtype=np.float32) / 255.0)


def to_pil(image: RgbaImage) -> Image.Image:
    data = np.clip(np.rint(image.pixels * 255.0), 0, 255).astype(np.uint8)
    return Image.fromarray(data)


def load_image(path: Path) -> RgbaImage:
    """Decode *path* into an :class:`RgbaImage`."""

    try:
        with Image.open(path) as im:
            return from_pil(im)
    except (
        OSError,
        UnidentifiedImageError,
        ValueError,
        Image.DecompressionBombError,
    ) as exc:
        raise ImageIOError(f"Unable to read image {path}: {exc}") from exc


def save_png(image: RgbaImage, path: Path) -> Path:
    """Encode *image* as PNG at *path* and return the path."""

    path = Path(path)
    try:
        to_pil(image).save(path, format="PNG")
    except (OSError, ValueError) as exc:
        raise ImageIOError(f"Unable to write image {path}: {exc}") from exc
    logger.debug("Wrote %s (%dx%d)", path, image.width, image.height)
    return path


__all__ = [
    "ImageIOError",
    "RgbaImage",
    "from_pil",
    "load_image",
    "save_png",
    "to_pil",
]
