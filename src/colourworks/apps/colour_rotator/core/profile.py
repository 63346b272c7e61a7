"""Loading and validation of rotation profiles.

A profile is a JSON document of the form::

    {"targetColours": [{"name": "yellow", "hue": 60}, ...]}

Hues must be JSON numbers in ``[0, 360)``, names non-empty strings. Unknown
fields and repeated keys are rejected rather than silently dropped.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, List, Tuple, Union

from pydantic import ValidationError

from .models import RotationProfile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_RESOURCE = "default_profile.json"


class ProfileError(RuntimeError):
    """Raised when a rotation profile cannot be read or fails validation.

    ``detail`` carries the full underlying diagnostic for verbose output.
    """

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> dict:
    result: dict = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate field {key!r}")
        result[key] = value
    return result


def parse_profile(text: Union[str, bytes], *, source: str = "<string>") -> RotationProfile:
    """Parse and validate a profile document."""

    try:
        payload = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except ValueError as exc:
        # JSONDecodeError is a ValueError subclass, as is the duplicate-key error
        raise ProfileError(f"Failed to parse rotation profile {source}.", str(exc)) from exc

    try:
        profile = RotationProfile.model_validate(payload)
    except ValidationError as exc:
        raise ProfileError(f"Failed to parse rotation profile {source}.", str(exc)) from exc

    logger.debug("Loaded rotation profile %s with %d colours", source, len(profile))
    return profile


def load_profile(path: Path) -> RotationProfile:
    """Read a profile from *path*."""

    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise ProfileError(f"Failed to read rotation profile {path}.", str(exc)) from exc
    return parse_profile(text, source=str(path))


def load_default_profile() -> RotationProfile:
    """Return the profile bundled with the package."""

    resource = resources.files(__package__).joinpath(DEFAULT_PROFILE_RESOURCE)
    return parse_profile(resource.read_text(encoding="utf-8"), source="(bundled default)")


def resolve_profile(path: Path | None) -> RotationProfile:
    if path is None:
        return load_default_profile()
    return load_profile(path)


def dump_profile(profile: RotationProfile) -> str:
    """Serialise *profile* back to the JSON shape accepted by :func:`parse_profile`."""

    return json.dumps(profile.model_dump(mode="json", by_alias=True), indent=2)


__all__ = [
    "ProfileError",
    "dump_profile",
    "load_default_profile",
    "load_profile",
    "parse_profile",
    "resolve_profile",
]
