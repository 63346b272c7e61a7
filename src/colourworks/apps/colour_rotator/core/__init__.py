"""Colour rotator core: profiles, pixel buffers, the hue transform and the batch runner."""

from .config import RotatorConfig, RotatorSettings, build_runtime_config, load_config
from .imaging import ImageIOError, RgbaImage, load_image, save_png
from .models import RotationJob, RotationProfile, RotationResult, RotationStatus, TargetColour
from .profile import ProfileError, load_default_profile, load_profile, parse_profile
from .runner import RotationRunner, output_path_for
from .transform import rotate

__all__ = [
    "ImageIOError",
    "ProfileError",
    "RgbaImage",
    "RotationJob",
    "RotationProfile",
    "RotationResult",
    "RotationRunner",
    "RotationStatus",
    "RotatorConfig",
    "RotatorSettings",
    "TargetColour",
    "build_runtime_config",
    "load_config",
    "load_default_profile",
    "load_image",
    "load_profile",
    "output_path_for",
    "parse_profile",
    "rotate",
    "save_png",
]
