"""Angle arithmetic and angular sectors on the HSV hue circle.

Hues are measured in degrees. Every angle that enters a :class:`CircleSector`
is folded into ``[0, 360)`` first, so ``-10``, ``350`` and ``710`` all name
the same hue.

All functions assume finite input. NaN or infinite angles are a caller error;
:class:`CircleSector` rejects them at construction so that per-pixel code
never has to.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np

FULL_TURN = 360.0

ArrayLike = Union[float, np.ndarray]


def normalize_angle(angle: float) -> float:
    """Map *angle* into ``[0, 360)``; negative angles wrap upwards."""

    normalized = float(angle) % FULL_TURN
    # -1e-20 % 360 rounds to 360.0
    if normalized >= FULL_TURN:
        normalized = 0.0
    return normalized


def normalize_angles(angles: ArrayLike) -> np.ndarray:
    """Vectorised :func:`normalize_angle` returning a float64 array."""

    normalized = np.mod(np.asarray(angles, dtype=np.float64), FULL_TURN)
    return np.where(normalized >= FULL_TURN, 0.0, normalized)


def signed_distance(a: float, b: float) -> float:
    """Shortest signed angular distance from *a* to *b*, in ``(-180, 180]``.

    Positive values mean *b* lies counter-clockwise (increasing angle) of *a*.
    """

    distance = (float(b) - float(a) + 180.0) % FULL_TURN - 180.0
    if distance <= -180.0:
        distance += FULL_TURN
    return distance


@dataclass(frozen=True)
class CircleSector:
    """Arc of the hue circle swept from ``start`` to ``end`` in increasing angle.

    Both bounds are normalised on construction. ``CircleSector(340, 20)``
    therefore covers ``[340, 360) ∪ [0, 20]``.

    A sector whose bounds coincide covers the full circle: its arc length is
    360 rather than 0. ``CircleSector.around(h, 360)`` thus selects every hue.
    """

    start: float
    end: float

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"Sector {name} must be a finite angle, got {value!r}")
            object.__setattr__(self, name, normalize_angle(value))

    @classmethod
    def around(cls, centre: float, width: float) -> "CircleSector":
        """Sector of total *width* degrees centred on *centre*."""

        half = float(width) / 2.0
        return cls(float(centre) - half, float(centre) + half)

    @property
    def arc_length(self) -> float:
        span = normalize_angle(self.end - self.start)
        return span if span > 0.0 else FULL_TURN

    @property
    def is_full_circle(self) -> bool:
        return self.start == self.end

    def _offset(self, angle: float) -> float:
        return normalize_angle(normalize_angle(angle) - self.start)

    def is_inside_sector(self, angle: float) -> bool:
        """Return True when *angle* lies on the arc, bounds included."""

        return self._offset(angle) <= self.arc_length

    def __contains__(self, angle: float) -> bool:
        return self.is_inside_sector(angle)

    def alpha_of(self, angle: float) -> float:
        """Fractional position of *angle* along the arc: 0 at start, 1 at end.

        Only meaningful for angles inside the sector; check
        :meth:`is_inside_sector` first.
        """

        return self._offset(angle) / self.arc_length

    def linear_interpolate(self, alpha: float) -> float:
        """Angle at fractional position *alpha*; inverse of :meth:`alpha_of`.

        *alpha* is not clamped, values outside ``[0, 1]`` extrapolate past
        the bounds.
        """

        return normalize_angle(self.start + self.arc_length * float(alpha))

    # ------------------------------------------------------------------
    # Array variants used by the pixel pipeline
    # ------------------------------------------------------------------
    def contains(self, hues: ArrayLike) -> np.ndarray:
        """Boolean mask of the *hues* that fall inside the sector."""

        offsets = normalize_angles(normalize_angles(hues) - self.start)
        return offsets <= self.arc_length

    def alphas(self, hues: ArrayLike) -> np.ndarray:
        offsets = normalize_angles(normalize_angles(hues) - self.start)
        return offsets / self.arc_length

    def interpolate(self, alphas: ArrayLike) -> np.ndarray:
        alphas = np.asarray(alphas, dtype=np.float64)
        return normalize_angles(self.start + self.arc_length * alphas)


__all__ = [
    "CircleSector",
    "FULL_TURN",
    "normalize_angle",
    "normalize_angles",
    "signed_distance",
]
