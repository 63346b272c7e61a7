import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from colourworks import logging_utils  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path, monkeypatch):
    """Keep log files out of the repository and drop handlers between tests."""

    log_dir = tmp_path / "logs"
    monkeypatch.setenv("COLOURWORKS_LOG_DIR", str(log_dir))
    yield log_dir
    logging_utils._remove_managed_handlers(logging.getLogger())  # type: ignore[attr-defined]
