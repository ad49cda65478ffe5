# src/taskdash/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Make interactive console usable:
    - allow taskdash logs
    - but keep per-mutation store chatter out of the console unless WARNING+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("taskdash."):
            # Store/persistence log every mutation; the file log has them all.
            if name in ("taskdash.tasks.task_store", "taskdash.tasks.task_persistence"):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(value: int | str, default: int) -> int:
    """Accept 10 / "DEBUG" / "debug"; unknown names map to `default`."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdash",
    app_name: str = "taskdash",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Route all logging to a filtered stderr console and to <log_dir>/<app_name>.log.

    Replaces any handlers already on the root logger, so call it once at
    startup. Returns the log file path.
    """
    log_file = Path(log_dir) / f"{app_name or 'taskdash'}.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(console_level, logging.INFO))
    console.addFilter(_ConsoleNoiseFilter())

    file = logging.FileHandler(str(log_file), encoding="utf-8")
    file.setLevel(_level(file_level, logging.DEBUG))

    for handler in (console, file):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)
    return log_file
