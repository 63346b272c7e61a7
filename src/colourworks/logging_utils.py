"""Logging setup shared by colourworks command line tools.

Every run appends detailed records to ``<log dir>/<name>.log``. With
``verbose`` the same records, minus timestamps, are echoed to stderr so the
user sees per-image progress messages.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

__all__ = ["LOG_DIR_ENV", "configure_logging"]

LOG_DIR_ENV = "COLOURWORKS_LOG_DIR"

_MANAGED_HANDLER_FLAG = "_colourworks_managed_handler"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def _default_log_directory() -> Path:
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    # Source checkouts log next to pyproject.toml; installed copies use cwd.
    for parent in Path(__file__).resolve().parents:
        if (parent / "pyproject.toml").is_file():
            return parent / "logs"
    return Path.cwd() / "logs"


def _remove_managed_handlers(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if getattr(h, _MANAGED_HANDLER_FLAG, False)]:
        logger.removeHandler(handler)
        handler.close()


def _managed(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    setattr(handler, _MANAGED_HANDLER_FLAG, True)
    return handler


def configure_logging(
    log_name: str,
    *,
    verbose: bool = False,
    log_dir: Optional[Path] = None,
) -> Path:
    """Attach the colourworks handlers to the root logger and return the log path.

    ``verbose`` lowers the level to DEBUG and adds the stderr handler.
    Handlers from an earlier call are replaced, never stacked.
    """

    directory = Path(log_dir).expanduser() if log_dir else _default_log_directory()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / f"{log_name}.log"
    level = logging.DEBUG if verbose else logging.INFO

    root = logging.getLogger()
    _remove_managed_handlers(root)
    root.setLevel(level)
    root.addHandler(
        _managed(logging.FileHandler(log_path, encoding="utf-8"), level, _FILE_FORMAT)
    )
    if verbose:
        root.addHandler(
            _managed(logging.StreamHandler(sys.stderr), level, _CONSOLE_FORMAT)
        )

    logging.captureWarnings(True)
    return log_path
