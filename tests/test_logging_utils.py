import logging

from colourworks.logging_utils import LOG_DIR_ENV, configure_logging


def _managed_handlers():
    return [
        h
        for h in logging.getLogger().handlers
        if getattr(h, "_colourworks_managed_handler", False)
    ]


def test_log_dir_comes_from_environment(monkeypatch, tmp_path):
    target_dir = tmp_path / "env_logs"
    monkeypatch.setenv(LOG_DIR_ENV, str(target_dir))

    log_path = configure_logging("colour_rotator")
    logging.getLogger("colourworks.test").info("written to env dir")

    assert log_path == target_dir / "colour_rotator.log"
    assert "written to env dir" in log_path.read_text(encoding="utf-8")


def test_reconfiguring_moves_output_to_new_file(tmp_path):
    first = configure_logging("first", log_dir=tmp_path / "a")
    logging.getLogger("colourworks.test").info("first entry")

    second = configure_logging("second", log_dir=tmp_path / "b")
    logging.getLogger("colourworks.test").info("second entry")

    assert "first entry" in first.read_text(encoding="utf-8")
    assert "second entry" in second.read_text(encoding="utf-8")
    assert "second entry" not in first.read_text(encoding="utf-8")
    assert len(_managed_handlers()) == 1


def test_quiet_runs_skip_debug_and_console(tmp_path):
    log_path = configure_logging("quiet", log_dir=tmp_path)
    logging.getLogger("colourworks.test").debug("hidden detail")

    assert "hidden detail" not in log_path.read_text(encoding="utf-8")
    assert [type(h) for h in _managed_handlers()] == [logging.FileHandler]


def test_verbose_runs_log_debug_to_file_and_stderr(tmp_path, capsys):
    log_path = configure_logging("loud", verbose=True, log_dir=tmp_path)
    logging.getLogger("colourworks.test").debug("fine grained detail")

    assert "fine grained detail" in log_path.read_text(encoding="utf-8")
    assert "DEBUG: fine grained detail" in capsys.readouterr().err
