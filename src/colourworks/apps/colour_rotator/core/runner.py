"""Batch execution: every input image rotated towards every profile colour."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

from colourworks.libs.vision.hue_sectors import CircleSector

from .config import RotatorConfig, validate_inputs
from .imaging import ImageIOError, RgbaImage, load_image, save_png
from .models import (
    RotationJob,
    RotationProfile,
    RotationResult,
    RotationStatus,
    TargetColour,
)
from .transform import rotate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[RotationResult, int, int], None]


def output_path_for(input_path: Path, colour: TargetColour, output_dir: Path) -> Path:
    """``<output_dir>/<input stem>-<colour name>.png``."""

    return Path(output_dir) / f"{Path(input_path).stem}-{colour.name}.png"


class RotationRunner:
    """Produce one recoloured PNG per (input image, target colour) pair."""

    def __init__(
        self,
        config: RotatorConfig,
        profile: RotationProfile,
        *,
        loader: Callable[[Path], RgbaImage] = load_image,
        saver: Callable[[RgbaImage, Path], Path] = save_png,
    ) -> None:
        self.config = config
        self.profile = profile
        self._load = loader
        self._save = saver
        self.from_sector = CircleSector.around(config.hue, config.in_window_size)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def to_sector(self, colour: TargetColour) -> CircleSector:
        return CircleSector.around(colour.hue, self.config.out_window_size)

    def jobs_for(self, input_path: Path) -> List[RotationJob]:
        return [
            RotationJob(
                input_path=input_path,
                colour=colour,
                output_path=output_path_for(input_path, colour, self.config.output_dir),
            )
            for colour in self.profile
        ]

    def plan(self) -> List[RotationJob]:
        """All jobs in input-file order, then profile order."""

        return [
            job
            for input_path in self.config.input_files
            for job in self.jobs_for(input_path)
        ]

    def run(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RotationResult]:
        """Execute every planned job.

        Missing inputs abort before any work starts. Read and write failures
        only fail the affected jobs. Setting *cancel_event* stops new jobs
        from being scheduled; those are reported as cancelled.
        """

        validate_inputs(self.config)
        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        total = len(self.config.input_files) * len(self.profile)
        logger.info(
            "Rotating %d image(s) x %d colour(s) from %s into %s",
            len(self.config.input_files),
            len(self.profile),
            self.from_sector,
            self.config.output_dir,
        )

        results: List[RotationResult] = []

        def record(result: RotationResult) -> None:
            results.append(result)
            if progress_callback:
                progress_callback(result, len(results), total)

        for input_path in self.config.input_files:
            image_jobs = self.jobs_for(input_path)
            if _cancelled(cancel_event):
                for job in image_jobs:
                    record(RotationResult(job, RotationStatus.CANCELLED))
                continue

            try:
                image = self._load(input_path)
            except ImageIOError as exc:
                logger.error("Skipping %s: %s", input_path, exc)
                for job in image_jobs:
                    record(RotationResult(job, RotationStatus.FAILED, str(exc)))
                continue

            for result in self._run_image_jobs(image, image_jobs, cancel_event):
                record(result)

        failures = sum(1 for result in results if result.status is RotationStatus.FAILED)
        logger.info("Finished %d job(s), %d failed", total, failures)
        return results

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _run_image_jobs(
        self,
        image: RgbaImage,
        jobs: Sequence[RotationJob],
        cancel_event: Optional[threading.Event],
    ) -> Iterator[RotationResult]:
        if self.config.workers <= 1 or len(jobs) <= 1:
            for job in jobs:
                if _cancelled(cancel_event):
                    yield RotationResult(job, RotationStatus.CANCELLED)
                    continue
                yield self._write(job, self._rotate(image, job))
            return

        # Pixel work runs on the pool; files are written here, in plan order.
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = [executor.submit(self._rotate, image, job) for job in jobs]
            for job, future in zip(jobs, futures):
                if _cancelled(cancel_event):
                    future.cancel()
                    yield RotationResult(job, RotationStatus.CANCELLED)
                    continue
                yield self._write(job, future.result())

    def _rotate(self, image: RgbaImage, job: RotationJob) -> RgbaImage:
        if self.config.verbose:
            logger.info("Rotating %s to %s...", job.input_path.name, job.colour.name)
        else:
            logger.debug("Rotating %s to %s", job.input_path.name, job.colour)

        return rotate(
            image,
            self.from_sector,
            self.to_sector(job.colour),
            self.config.saturation_modifier,
            self.config.value_modifier,
        )

    def _write(self, job: RotationJob, rotated: RgbaImage) -> RotationResult:
        try:
            self._save(rotated, job.output_path)
        except ImageIOError as exc:
            logger.error("Failed to write %s: %s", job.output_path, exc)
            return RotationResult(job, RotationStatus.FAILED, str(exc))
        return RotationResult(job, RotationStatus.OK)


def _cancelled(event: Optional[threading.Event]) -> bool:
    return event is not None and event.is_set()


__all__ = ["ProgressCallback", "RotationRunner", "output_path_for"]
