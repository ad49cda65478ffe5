# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from taskdash.logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_log_file_is_named_after_app(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", app_name="taskdash-test", console_level="warning")

    logging.getLogger("taskdash.tasks.task_store").debug("Task added id=%s", "a")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "taskdash-test.log"
    assert "Task added id=a" in log_file.read_text("utf-8")
    console = [h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler)]
    assert [h.level for h in console] == [logging.WARNING]


def test_unknown_level_name_falls_back(tmp_path: Path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path, console_level="chatty", file_level="nope")

    levels = sorted(h.level for h in logging.getLogger().handlers)
    assert levels == [logging.DEBUG, logging.INFO]


def test_console_filter_hides_store_chatter() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("taskdash.cli.commands", logging.INFO))
    assert not f.filter(_record("taskdash.tasks.task_store", logging.INFO))
    assert f.filter(_record("taskdash.tasks.task_persistence", logging.WARNING))
    assert not f.filter(_record("urllib3", logging.WARNING))
    assert f.filter(_record("urllib3", logging.ERROR))
