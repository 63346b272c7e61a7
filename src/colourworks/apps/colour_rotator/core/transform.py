"""Hue rotation of pixel buffers."""

from __future__ import annotations

import logging

import numpy as np

from colourworks.libs.vision.hsv import hsv_to_rgb, rgb_to_hsv
from colourworks.libs.vision.hue_sectors import CircleSector

from .imaging import RgbaImage

logger = logging.getLogger(__name__)


def check_modifier(name: str, value: float) -> float:
    """Return *value* as a float, rejecting anything outside ``[-1, 1]``."""
    value = float(value)
    if not -1.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in the range [-1, 1], got {value}")
    return value


def rotate(
    image: RgbaImage,
    from_sector: CircleSector,
    to_sector: CircleSector,
    saturation_modifier: float = 0.0,
    value_modifier: float = 0.0,
) -> RgbaImage:
    """Return a copy of *image* with hues in *from_sector* moved into *to_sector*.

    A pixel whose hue sits at fraction ``a`` of the way along ``from_sector``
    receives the hue at fraction ``a`` along ``to_sector``; its saturation and
    value are shifted by the modifiers and clamped to ``[0, 1]``. Pixels
    outside ``from_sector`` and the alpha channel are copied unchanged. The
    input buffer is never modified.
    """

    saturation_modifier = check_modifier("Saturation modifier", saturation_modifier)
    value_modifier = check_modifier("Value modifier", value_modifier)

    result = image.copy()
    pixels = result.pixels
    if pixels.size == 0:
        return result

    hsv = rgb_to_hsv(pixels[..., :3])
    mask = from_sector.contains(hsv[..., 0])
    selected = int(np.count_nonzero(mask))
    logger.debug(
        "Rotating %d/%d pixels from %s to %s",
        selected,
        mask.size,
        from_sector,
        to_sector,
    )
    if not selected:
        return result

    inside = hsv[mask].astype(np.float64)
    inside[:, 0] = to_sector.interpolate(from_sector.alphas(inside[:, 0]))
    inside[:, 1] = np.clip(inside[:, 1] + saturation_modifier, 0.0, 1.0)
    inside[:, 2] = np.clip(inside[:, 2] + value_modifier, 0.0, 1.0)

    pixels[mask, :3] = hsv_to_rgb(inside)
    return result


__all__ = ["check_modifier", "rotate"]
