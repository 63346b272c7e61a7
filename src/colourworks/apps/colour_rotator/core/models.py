"""Data models for colour rotation runs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TargetColour(BaseModel):
    """A named destination hue in a rotation profile."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, strict=True)
    hue: float = Field(..., ge=0.0, lt=360.0, strict=True)

    def __str__(self) -> str:
        return f"{self.name}: {self.hue:.1f}"


class RotationProfile(BaseModel):
    """Ordered, read-only list of target colours.

    Order only decides the order output files are produced in. Duplicate
    names are allowed; the later output simply overwrites the earlier one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_colours: tuple[TargetColour, ...] = Field(..., alias="targetColours")

    def __iter__(self) -> Iterator[TargetColour]:  # type: ignore[override]
        return iter(self.target_colours)

    def __len__(self) -> int:
        return len(self.target_colours)

    def __getitem__(self, index: int) -> TargetColour:
        return self.target_colours[index]

    def names(self) -> List[str]:
        return [colour.name for colour in self.target_colours]


class RotationStatus(str, Enum):
    """Outcome of a single (image, target colour) pair."""

    OK = "ok"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RotationJob:
    """One input image rotated towards one target colour."""

    input_path: Path
    colour: TargetColour
    output_path: Path


@dataclass(frozen=True)
class RotationResult:
    job: RotationJob
    status: RotationStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is RotationStatus.OK

    def to_json(self) -> Dict[str, object]:
        return {
            "input": str(self.job.input_path),
            "colour": self.job.colour.name,
            "hue": float(self.job.colour.hue),
            "output": str(self.job.output_path),
            "status": self.status.value,
            "error": self.error,
        }
