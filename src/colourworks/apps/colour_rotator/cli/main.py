"""Command line interface for the colour rotator."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from colourworks.logging_utils import configure_logging

from ..core.config import load_config, validate_inputs
from ..core.models import RotationResult, RotationStatus
from ..core.profile import ProfileError, dump_profile, resolve_profile
from ..core.runner import RotationRunner

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="colour-rotator",
    help="Colour Rotator - recolour images by remapping a band of hues.",
    no_args_is_help=True,
)
err_console = Console(stderr=True)

EXIT_FATAL = 1
EXIT_PARTIAL = 3


def _fail(message: str, detail: Optional[str] = None) -> typer.Exit:
    for line in (message, detail):
        if line:
            err_console.print(
                line, style="red", markup=False, highlight=False, soft_wrap=True
            )
    return typer.Exit(EXIT_FATAL)


@app.command()
def rotate(
    input_files: Optional[List[Path]] = typer.Argument(
        None, metavar="[INPUT]...", help="The input files that are to be rotated."
    ),
    input_option: Optional[List[Path]] = typer.Option(
        None,
        "--input-files",
        "-i",
        help="Input file to rotate (repeatable); processed before positional inputs.",
    ),
    hue: float = typer.Option(
        ..., "--hue", "-h", help="The hue of the dominant colour in the image."
    ),
    in_window_size: Optional[float] = typer.Option(
        None, "--in-size", "-s", help="The size of the input sector window (degrees)."
    ),
    out_window_size: Optional[float] = typer.Option(
        None, "--out-size", "-o", help="The size of the output sector window (degrees)."
    ),
    profile_path: Optional[Path] = typer.Option(
        None, "--profile", "-p", help="The path to the rotation profile to use."
    ),
    saturation_modifier: Optional[float] = typer.Option(
        None,
        "--saturation-modifier",
        help="The HSV saturation modifier to apply, between -1 and 1.",
    ),
    value_modifier: Optional[float] = typer.Option(
        None,
        "--value-modifier",
        help="The HSV value modifier to apply, between -1 and 1.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        help="Directory for rotated images (defaults to the current directory).",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", help="Number of colours to render in parallel per image."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Whether the application should be verbose."
    ),
) -> None:
    """Write one recoloured PNG per input image and profile colour."""

    log_path = configure_logging("colour_rotator", verbose=verbose)
    logger.debug("Colour rotator logging initialised -> %s", log_path)

    overrides: dict[str, object] = {
        "in_window_size": in_window_size,
        "out_window_size": out_window_size,
        "saturation_modifier": saturation_modifier,
        "value_modifier": value_modifier,
        "profile_path": profile_path,
        "output_dir": output_dir,
        "workers": workers,
    }
    try:
        config = load_config(
            input_files=[*(input_option or []), *(input_files or [])],
            hue=hue,
            verbose=verbose,
            **{k: v for k, v in overrides.items() if v is not None},
        )
    except ValueError as exc:
        raise _fail(str(exc))

    try:
        validate_inputs(config)
        profile = resolve_profile(config.profile_path)
    except FileNotFoundError as exc:
        raise _fail(str(exc))
    except ProfileError as exc:
        raise _fail(str(exc), exc.detail if verbose else None)

    runner = RotationRunner(config, profile)
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=err_console,
        transient=True,
        disable=verbose,
    )
    try:
        with progress:
            task = progress.add_task(
                "Rotating", total=len(config.input_files) * len(profile)
            )
            results = runner.run(
                progress_callback=lambda _result, done, _total: progress.update(
                    task, completed=done
                )
            )
    except FileNotFoundError as exc:
        raise _fail(str(exc))

    _print_terminal_summary(results)
    if any(result.status is not RotationStatus.OK for result in results):
        raise typer.Exit(EXIT_PARTIAL)


@app.command("show-profile")
def show_profile(
    profile_path: Optional[Path] = typer.Option(
        None, "--profile", "-p", help="Profile to display instead of the bundled default."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the resolved rotation profile as JSON."""

    try:
        profile = resolve_profile(profile_path)
    except FileNotFoundError:
        raise _fail(f"Rotation profile not found: {profile_path}")
    except ProfileError as exc:
        raise _fail(str(exc), exc.detail if verbose else None)
    typer.echo(dump_profile(profile))


def _print_terminal_summary(results: Sequence[RotationResult]) -> None:
    counts = Counter(result.status for result in results)
    typer.echo("Summary:")
    for status in RotationStatus:
        typer.echo(f"  {status.value.upper():>9}: {counts.get(status, 0)}")

    for result in results:
        if result.ok:
            typer.echo(f"  {result.job.output_path}")
        elif result.status is RotationStatus.FAILED:
            err_console.print(
                f"  {result.job.input_path.name} -> {result.job.colour.name}: {result.error}",
                style="red",
                markup=False,
                highlight=False,
            )


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
