"""Configuration helpers for the colour rotator.

Values resolve in three layers: built-in defaults, then
``[tool.colourworks.colour_rotator]`` in the nearest ``pyproject.toml``, then
``COLOURWORKS_COLOUR_ROTATOR__*`` environment variables. Explicit arguments
(usually CLI flags) override all of them.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import tomllib

from .transform import check_modifier

logger = logging.getLogger(__name__)

_CONFIG_ENV_PREFIX = "COLOURWORKS_COLOUR_ROTATOR__"


def _find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
    """Locate the closest ``pyproject.toml`` relative to *start*."""

    current = (start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        pyproject = candidate / "pyproject.toml"
        if pyproject.exists():
            return pyproject
    return None


def _coerce_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer setting %r", value)
        return default


def _coerce_float(value: object, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric setting %r", value)
        return default


def _as_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return None


@dataclass(frozen=True)
class RotatorSettings:
    """Default values applied when a run does not specify them."""

    default_in_window_size: float = 90.0
    default_out_window_size: float = 90.0
    default_saturation_modifier: float = 0.0
    default_value_modifier: float = 0.0
    default_profile_path: Optional[Path] = None
    default_output_dir: Optional[Path] = None
    default_workers: int = 1


@dataclass(frozen=True)
class RotatorConfig:
    """Fully resolved, immutable configuration for one rotator run."""

    input_files: Tuple[Path, ...]
    hue: float
    in_window_size: float
    out_window_size: float
    saturation_modifier: float
    value_modifier: float
    profile_path: Optional[Path]
    output_dir: Path
    verbose: bool
    workers: int


def _load_pyproject_settings(start: Optional[Path]) -> Dict[str, object]:
    pyproject = _find_pyproject(start)
    if not pyproject:
        return {}

    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Failed to load settings from %s: %s", pyproject, exc)
        return {}

    tool_cfg = data.get("tool", {}).get("colourworks", {})
    if not isinstance(tool_cfg, dict):
        return {}

    rotator_cfg = tool_cfg.get("colour_rotator")
    return dict(rotator_cfg) if isinstance(rotator_cfg, dict) else {}


def _load_env_settings() -> Dict[str, object]:
    values: Dict[str, object] = {}
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(_CONFIG_ENV_PREFIX):
            continue
        key = env_key[len(_CONFIG_ENV_PREFIX) :].lower()
        values[key] = env_value
    return values


def load_settings(start: Optional[Path] = None) -> RotatorSettings:
    """Load project defaults, applying environment overrides when present."""

    raw = _load_pyproject_settings(start)
    raw.update(_load_env_settings())

    return RotatorSettings(
        default_in_window_size=_coerce_float(
            raw.get("default_in_window_size"), RotatorSettings.default_in_window_size
        ),
        default_out_window_size=_coerce_float(
            raw.get("default_out_window_size"), RotatorSettings.default_out_window_size
        ),
        default_saturation_modifier=_coerce_float(
            raw.get("default_saturation_modifier"),
            RotatorSettings.default_saturation_modifier,
        ),
        default_value_modifier=_coerce_float(
            raw.get("default_value_modifier"), RotatorSettings.default_value_modifier
        ),
        default_profile_path=_as_path(raw.get("default_profile_path")),
        default_output_dir=_as_path(raw.get("default_output_dir")),
        default_workers=_coerce_int(
            raw.get("default_workers"), RotatorSettings.default_workers
        ),
    )


def _check_window(name: str, value: float) -> float:
    value = float(value)
    if not (math.isfinite(value) and 0.0 < value <= 360.0):
        raise ValueError(f"{name} must be in the range (0, 360], got {value}")
    return value


def build_runtime_config(
    *,
    settings: RotatorSettings,
    input_files: Optional[Sequence[Path]] = None,
    hue: Optional[float] = None,
    in_window_size: Optional[float] = None,
    out_window_size: Optional[float] = None,
    saturation_modifier: Optional[float] = None,
    value_modifier: Optional[float] = None,
    profile_path: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    verbose: bool = False,
    workers: Optional[int] = None,
) -> RotatorConfig:
    """Merge explicit overrides with *settings* and validate the result."""

    resolved_inputs = tuple(Path(path).expanduser() for path in (input_files or ()))
    if not resolved_inputs:
        raise ValueError("At least one input file must be provided")

    if hue is None:
        raise ValueError("The hue of the dominant colour is required")
    resolved_hue = float(hue)
    if not math.isfinite(resolved_hue):
        raise ValueError(f"Hue must be a finite angle, got {resolved_hue}")

    resolved_in = _check_window(
        "Input window size",
        settings.default_in_window_size if in_window_size is None else in_window_size,
    )
    resolved_out = _check_window(
        "Output window size",
        settings.default_out_window_size
        if out_window_size is None
        else out_window_size,
    )
    resolved_saturation = check_modifier(
        "Saturation modifier",
        settings.default_saturation_modifier
        if saturation_modifier is None
        else saturation_modifier,
    )
    resolved_value = check_modifier(
        "Value modifier",
        settings.default_value_modifier if value_modifier is None else value_modifier,
    )

    resolved_profile = profile_path or settings.default_profile_path
    if resolved_profile is not None:
        resolved_profile = Path(resolved_profile).expanduser()
    resolved_output = Path(
        output_dir or settings.default_output_dir or Path.cwd()
    ).expanduser()

    resolved_workers = int(settings.default_workers if workers is None else workers)
    if resolved_workers < 1:
        raise ValueError(f"Workers must be at least 1, got {resolved_workers}")

    return RotatorConfig(
        input_files=resolved_inputs,
        hue=resolved_hue,
        in_window_size=resolved_in,
        out_window_size=resolved_out,
        saturation_modifier=resolved_saturation,
        value_modifier=resolved_value,
        profile_path=resolved_profile,
        output_dir=resolved_output,
        verbose=bool(verbose),
        workers=resolved_workers,
    )


def load_config(*, start: Optional[Path] = None, **overrides: object) -> RotatorConfig:
    """Convenience helper used by the CLI to resolve the runtime config."""

    settings = load_settings(start)
    return build_runtime_config(settings=settings, **overrides)


def validate_inputs(config: RotatorConfig) -> None:
    """Fail fast if any input image or the profile file is missing."""

    missing = [
        str(path.resolve())
        for path in config.input_files
        if not path.is_file()
    ]
    if missing:
        raise FileNotFoundError("File not found: " + ", ".join(missing))
    if config.profile_path is not None and not config.profile_path.is_file():
        raise FileNotFoundError(
            f"Rotation profile not found: {config.profile_path.resolve()}"
        )
