"""HSV conversions for floating point RGB data."""

from __future__ import annotations

import cv2
import numpy as np


def rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
    """Convert ``(..., 3)`` RGB in ``[0, 1]`` to HSV.

    Hue is returned in degrees ``[0, 360)``, saturation and value in ``[0, 1]``.
    """
    rgb = np.ascontiguousarray(rgb, dtype=np.float32)
    if rgb.size == 0:
        return np.zeros_like(rgb)
    # OpenCV wants an image shaped array; float32 input keeps hue in degrees.
    flat = rgb.reshape(-1, 1, 3)
    hsv = cv2.cvtColor(flat, cv2.COLOR_RGB2HSV)
    hsv[..., 0] = np.where(hsv[..., 0] >= 360.0, hsv[..., 0] - 360.0, hsv[..., 0])
    return hsv.reshape(rgb.shape)


def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    """Inverse of :func:`rgb_to_hsv`."""
    hsv = np.array(hsv, dtype=np.float32, copy=True)
    if hsv.size == 0:
        return hsv
    hue = np.mod(hsv[..., 0], 360.0)
    # float32 rounding can push 359.99999 up to exactly 360
    hsv[..., 0] = np.where(hue >= 360.0, 0.0, hue)
    flat = hsv.reshape(-1, 1, 3)
    rgb = cv2.cvtColor(flat, cv2.COLOR_HSV2RGB)
    return np.clip(rgb, 0.0, 1.0).reshape(hsv.shape)


__all__ = ["hsv_to_rgb", "rgb_to_hsv"]
