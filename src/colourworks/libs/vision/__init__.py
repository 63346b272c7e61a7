from .hue_sectors import (
    CircleSector as CircleSector,
    normalize_angle as normalize_angle,
    normalize_angles as normalize_angles,
    signed_distance as signed_distance,
)
from .hsv import hsv_to_rgb as hsv_to_rgb, rgb_to_hsv as rgb_to_hsv

__all__ = [
    "CircleSector",
    "hsv_to_rgb",
    "normalize_angle",
    "normalize_angles",
    "rgb_to_hsv",
    "signed_distance",
]
