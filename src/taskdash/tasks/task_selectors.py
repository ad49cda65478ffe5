# src/taskdash/tasks/task_selectors.py

"""
Derived views over a task collection.

Every function here is pure: it reads a sequence of tasks and returns a new
value without touching the input.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from .task_models import FILTER_ALL, Task, TaskPriority, TaskStatus

_DUE_DATE_FORMATS = ("%Y-%m-%d", "%b %d, %Y", "%B %d, %Y")


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    in_progress: int


@dataclass(frozen=True, slots=True)
class PriorityStats:
    high: int
    medium: int
    low: int


@dataclass(frozen=True, slots=True)
class TaskFilters:
    """Search/status/priority filter. None, "" and "all" match everything."""

    search: str | None = None
    status: TaskStatus | str | None = FILTER_ALL
    priority: TaskPriority | str | None = FILTER_ALL

    def is_active(self) -> bool:
        return bool(self.search) or _is_set(self.status) or _is_set(self.priority)


def _is_set(value: str | None) -> bool:
    return bool(value) and value != FILTER_ALL


def statistics(tasks: Sequence[Task]) -> TaskStats:
    completed = pending = in_progress = 0
    for task in tasks:
        if task.status == TaskStatus.COMPLETED:
            completed += 1
        elif task.status == TaskStatus.PENDING:
            pending += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1
    return TaskStats(
        total=len(tasks),
        completed=completed,
        pending=pending,
        in_progress=in_progress,
    )


def _matches_search(task: Task, needle: str) -> bool:
    return (
        needle in task.title.lower()
        or needle in task.description.lower()
        or needle in task.assigned_to.lower()
    )


def filtered_tasks(
    tasks: Sequence[Task],
    filters: TaskFilters | None = None,
    *,
    search: str | None = None,
    status: TaskStatus | str | None = None,
    priority: TaskPriority | str | None = None,
) -> list[Task]:
    """
    Order-preserving subsequence matching all three predicates.

    Pass either a TaskFilters object or the individual keyword arguments;
    keywords take precedence over the object's fields when both are given.
    """
    if filters is not None:
        search = filters.search if search is None else search
        status = filters.status if status is None else status
        priority = filters.priority if priority is None else priority

    needle = (search or "").lower()
    want_status = status if _is_set(status) else None
    want_priority = priority if _is_set(priority) else None

    out: list[Task] = []
    for task in tasks:
        if needle and not _matches_search(task, needle):
            continue
        if want_status is not None and task.status != want_status:
            continue
        if want_priority is not None and task.priority != want_priority:
            continue
        out.append(task)
    return out


def task_by_id(tasks: Sequence[Task], task_id: str) -> Task | None:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def tasks_by_status(tasks: Sequence[Task], status: TaskStatus | str) -> list[Task]:
    return [t for t in tasks if t.status == status]


def tasks_by_priority(tasks: Sequence[Task], priority: TaskPriority | str) -> list[Task]:
    return [t for t in tasks if t.priority == priority]


# ---- analytics ----


def priority_breakdown(tasks: Sequence[Task]) -> PriorityStats:
    return PriorityStats(
        high=len(tasks_by_priority(tasks, TaskPriority.HIGH)),
        medium=len(tasks_by_priority(tasks, TaskPriority.MEDIUM)),
        low=len(tasks_by_priority(tasks, TaskPriority.LOW)),
    )


def completion_rate(tasks: Sequence[Task]) -> int:
    """Completed share as a rounded percentage (0 for an empty collection)."""
    if not tasks:
        return 0
    stats = statistics(tasks)
    return round(stats.completed / stats.total * 100)


def parse_due_date(raw: str | None) -> date | None:
    """Parse "2024-12-15" or "Dec 15, 2024". Anything else is None."""
    text = (raw or "").strip()
    if not text:
        return None
    for fmt in _DUE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def overdue_tasks(tasks: Sequence[Task], today: date) -> list[Task]:
    """Tasks due strictly before `today`. Unparseable due dates never count."""
    out: list[Task] = []
    for task in tasks:
        due = parse_due_date(task.due_date)
        if due is not None and due < today:
            out.append(task)
    return out


def overdue_count(tasks: Sequence[Task], today: date) -> int:
    return len(overdue_tasks(tasks, today))
