# src/taskdash/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any

from .task_models import EDITABLE_FIELDS, Task, TaskPriority, TaskStatus, new_task
from .task_selectors import task_by_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreChange:
    """Notification sent to subscribers after a mutation changed the store."""

    action: str
    tasks: tuple[Task, ...]
    tasks_changed: bool
    loading: bool
    error: str | None


StoreListener = Callable[[StoreChange], None]


class TaskStore:
    """
    In-memory task store: the single owner of the ordered task collection.

    Rules:
    - newest tasks live at index 0
    - update/delete of an unknown id is a silent no-op
    - no method raises; listener failures are logged and swallowed
    - the store does not validate field content (that belongs to the caller)

    Readers get tuple snapshots. Subscribers are notified after every mutation
    that actually changed something.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)
        self._loading = False
        self._error: str | None = None
        self._listeners: list[StoreListener] = []
        self._disposed = False
        logger.debug("TaskStore created total=%s", len(self._tasks))

    def dispose(self) -> None:
        """Drop all subscribers. Mutations after dispose are ignored."""
        self._listeners.clear()
        self._disposed = True
        logger.debug("TaskStore disposed")

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def get_task(self, task_id: str) -> Task | None:
        return task_by_id(self._tasks, task_id)

    # ---- observers ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def _emit(self, action: str, *, tasks_changed: bool) -> None:
        change = StoreChange(
            action=action,
            tasks=tuple(self._tasks),
            tasks_changed=tasks_changed,
            loading=self._loading,
            error=self._error,
        )
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Store listener failed action=%s", action)

    def _guard(self, action: str) -> bool:
        if self._disposed:
            logger.warning("Ignoring %s on a disposed TaskStore", action)
            return False
        return True

    # ---- collection mutations ----

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        """Replace the whole collection, keeping the given order."""
        if not self._guard("set_tasks"):
            return
        self._tasks = list(tasks)
        self._loading = False
        self._error = None
        logger.debug("Tasks replaced total=%s", len(self._tasks))
        self._emit("set_tasks", tasks_changed=True)

    def initialize_with_seed(self, tasks: Iterable[Task]) -> None:
        """Same as set_tasks; used for first-run population."""
        if not self._guard("initialize_with_seed"):
            return
        self._tasks = list(tasks)
        self._loading = False
        self._error = None
        logger.info("Store initialized with %s sample tasks", len(self._tasks))
        self._emit("initialize_with_seed", tasks_changed=True)

    def add_task(self, task: Task) -> None:
        """Insert at the head. The caller supplies a unique id."""
        if not self._guard("add_task"):
            return
        self._tasks.insert(0, task)
        self._error = None
        logger.debug("Task added id=%s status=%s", task.id, task.status)
        self._emit("add_task", tasks_changed=True)

    def create_task(
        self,
        *,
        title: str,
        description: str,
        due_date: str,
        assigned_to: str,
        status: TaskStatus | str = TaskStatus.PENDING,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
    ) -> Task:
        """Generate an id, add the task and return it."""
        task = new_task(
            title=title,
            description=description,
            due_date=due_date,
            assigned_to=assigned_to,
            status=status,
            priority=priority,
        )
        self.add_task(task)
        return task

    def update_task(self, task_id: str, **updates: Any) -> None:
        """
        Merge `updates` into the task with `task_id`, keeping its position.

        Unknown ids are a silent no-op. `id` and unknown field names are ignored.
        """
        if not self._guard("update_task"):
            return

        clean: dict[str, Any] = {}
        for key, value in updates.items():
            if key not in EDITABLE_FIELDS:
                logger.warning("update_task ignores field %r (task_id=%s)", key, task_id)
                continue
            try:
                if key == "status":
                    value = TaskStatus(value)
                elif key == "priority":
                    value = TaskPriority(value)
            except ValueError:
                logger.warning("update_task ignores %s=%r (task_id=%s)", key, value, task_id)
                continue
            clean[key] = value

        index = self._index_of(task_id)
        error_was_set = self._error is not None
        self._error = None

        if index is None:
            logger.debug("update_task: no task id=%s", task_id)
            if error_was_set:
                self._emit("update_task", tasks_changed=False)
            return

        self._tasks[index] = replace(self._tasks[index], **clean)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(clean))
        self._emit("update_task", tasks_changed=True)

    def delete_task(self, task_id: str) -> None:
        """Remove the task with `task_id`; unknown ids are a silent no-op."""
        if not self._guard("delete_task"):
            return

        index = self._index_of(task_id)
        error_was_set = self._error is not None
        self._error = None

        if index is None:
            logger.debug("delete_task: no task id=%s", task_id)
            if error_was_set:
                self._emit("delete_task", tasks_changed=False)
            return

        del self._tasks[index]
        logger.debug("Task deleted id=%s", task_id)
        self._emit("delete_task", tasks_changed=True)

    def clear_all(self) -> None:
        if not self._guard("clear_all"):
            return
        self._tasks = []
        self._loading = False
        self._error = None
        logger.info("All tasks cleared")
        self._emit("clear_all", tasks_changed=True)

    # ---- status flags ----

    def set_loading(self, loading: bool) -> None:
        if not self._guard("set_loading"):
            return
        self._loading = bool(loading)
        self._emit("set_loading", tasks_changed=False)

    def set_error(self, message: str | None) -> None:
        if not self._guard("set_error"):
            return
        self._error = message
        self._loading = False
        self._emit("set_error", tasks_changed=False)

    def clear_error(self) -> None:
        if not self._guard("clear_error"):
            return
        self._error = None
        self._emit("clear_error", tasks_changed=False)

    # ---- helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None
