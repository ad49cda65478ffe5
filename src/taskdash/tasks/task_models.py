# src/taskdash/tasks/task_models.py

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any

MIN_TITLE_LEN = 3
MIN_DESCRIPTION_LEN = 10
MIN_ASSIGNEE_LEN = 2

FILTER_ALL = "all"


class TaskFormatError(ValueError):
    """A persisted or imported task record does not have the expected shape."""


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Task:
    """
    One trackable unit of work.

    Records are immutable; the store replaces a record to update it, so a
    snapshot handed out to a caller never changes under it.
    """

    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: str
    assigned_to: str

    def __post_init__(self) -> None:
        # Plain strings ("pending", "high") are accepted and stored as enum members.
        object.__setattr__(self, "status", TaskStatus(self.status))
        object.__setattr__(self, "priority", TaskPriority(self.priority))

    def to_dict(self) -> dict[str, str]:
        """Record form used by the persisted snapshot and the export document."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": self.due_date,
            "assignedTo": self.assigned_to,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        if not isinstance(raw, Mapping):
            raise TaskFormatError(f"task record must be an object, got {type(raw).__name__}")

        missing = [k for k in _RECORD_KEYS if k not in raw]
        if missing:
            raise TaskFormatError(f"task record is missing fields: {', '.join(missing)}")

        try:
            status = TaskStatus(raw["status"])
            priority = TaskPriority(raw["priority"])
        except ValueError as e:
            raise TaskFormatError(str(e)) from e

        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            description=str(raw["description"]),
            status=status,
            priority=priority,
            due_date=str(raw["dueDate"]),
            assigned_to=str(raw["assignedTo"]),
        )


_RECORD_KEYS = ("id", "title", "description", "status", "priority", "dueDate", "assignedTo")

# Fields a caller may change through TaskStore.update_task.
EDITABLE_FIELDS = frozenset(f.name for f in fields(Task)) - {"id"}


def new_task_id() -> str:
    return uuid.uuid4().hex


def new_task(
    *,
    title: str,
    description: str,
    due_date: str,
    assigned_to: str,
    status: TaskStatus | str = TaskStatus.PENDING,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
) -> Task:
    """Build a Task with a freshly generated id."""
    return Task(
        id=new_task_id(),
        title=title,
        description=description,
        status=TaskStatus(status),
        priority=TaskPriority(priority),
        due_date=due_date,
        assigned_to=assigned_to,
    )


def validate_task_fields(values: Mapping[str, Any], *, partial: bool = False) -> list[str]:
    """
    Form-boundary validation.

    Returns a list of problems (empty when valid). With partial=True only the
    keys present in `values` are checked (edit form).
    """
    problems: list[str] = []

    def present(key: str) -> bool:
        return key in values or not partial

    def text(key: str) -> str:
        return str(values.get(key) or "").strip()

    if present("title") and len(text("title")) < MIN_TITLE_LEN:
        problems.append(f"Title must be at least {MIN_TITLE_LEN} characters")
    if present("description") and len(text("description")) < MIN_DESCRIPTION_LEN:
        problems.append(f"Description must be at least {MIN_DESCRIPTION_LEN} characters")
    if present("assigned_to") and len(text("assigned_to")) < MIN_ASSIGNEE_LEN:
        problems.append(f"Assignee must be at least {MIN_ASSIGNEE_LEN} characters")
    if present("due_date") and not text("due_date"):
        problems.append("Due date is required")

    if "status" in values and values["status"] not in set(TaskStatus):
        problems.append(f"Unknown status: {values['status']}")
    if "priority" in values and values["priority"] not in set(TaskPriority):
        problems.append(f"Unknown priority: {values['priority']}")

    return problems
