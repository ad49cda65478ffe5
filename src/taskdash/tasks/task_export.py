# src/taskdash/tasks/task_export.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from .task_models import Task, TaskFormatError

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "tasks"


def export_filename(today: date) -> str:
    return f"{EXPORT_PREFIX}-{today.isoformat()}.json"


def export_document(tasks: Iterable[Task]) -> str:
    """Pretty-printed (2-space) JSON array of task records."""
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)


def import_document(raw: str) -> list[Task]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TaskFormatError(f"export is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise TaskFormatError("export must be a JSON array of tasks")
    return [Task.from_dict(r) for r in data]


def write_export(tasks: Iterable[Task], directory: str | Path, *, today: date | None = None) -> Path:
    """Write the export document into `directory` and return the file path."""
    snapshot = list(tasks)
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(today or date.today())
    path.write_text(export_document(snapshot) + "\n", "utf-8")
    logger.info("Exported %s tasks to %s", len(snapshot), path)
    return path
