# src/taskdash/tasks/task_seed.py

"""
Seed policy: when to fill the store with sample tasks.

Only an empty store is ever seeded. A store holding real data (rehydrated
from disk or edited by the user) is left alone, including when the display
language changes.
"""

from __future__ import annotations

import logging

from ..core.ports import Translate
from .task_models import Task, TaskPriority, TaskStatus
from .task_store import TaskStore

logger = logging.getLogger(__name__)

# (id, message key stem, status, priority, due date, assignee)
_SAMPLES: tuple[tuple[str, str, TaskStatus, TaskPriority, str, str], ...] = (
    ("1", "updateWebsite", TaskStatus.COMPLETED, TaskPriority.HIGH, "Dec 15, 2024", "John Doe"),
    ("2", "reviewFeedback", TaskStatus.IN_PROGRESS, TaskPriority.MEDIUM, "Dec 20, 2024", "Jane Smith"),
    ("3", "updateDocs", TaskStatus.PENDING, TaskPriority.LOW, "Dec 25, 2024", "Mike Johnson"),
    ("4", "fixLoginBug", TaskStatus.PENDING, TaskPriority.HIGH, "Dec 18, 2024", "Sarah Wilson"),
    ("5", "optimizePerf", TaskStatus.IN_PROGRESS, TaskPriority.MEDIUM, "Dec 22, 2024", "Alex Brown"),
)


def create_sample_tasks(translate: Translate) -> list[Task]:
    return [
        Task(
            id=task_id,
            title=translate(f"tasks.mock.{stem}Title"),
            description=translate(f"tasks.mock.{stem}Desc"),
            status=status,
            priority=priority,
            due_date=due_date,
            assigned_to=assignee,
        )
        for task_id, stem, status, priority, due_date, assignee in _SAMPLES
    ]


class SeedPolicy:
    def __init__(self, store: TaskStore, *, enabled: bool = True) -> None:
        self._store = store
        self._enabled = enabled

    def ensure_seeded(self, translate: Translate) -> bool:
        """Seed the store if (and only if) it is empty. Returns True when it seeded."""
        if not self._enabled:
            return False
        if not self._store.is_empty():
            logger.debug("Seed skipped: store already holds %s tasks", len(self._store))
            return False
        self._store.initialize_with_seed(create_sample_tasks(translate))
        return True

    def on_language_changed(self, translate: Translate) -> bool:
        return self.ensure_seeded(translate)

    def reset_to_seed(self, translate: Translate) -> None:
        """Explicit user reset: drop everything and load the samples again."""
        self._store.clear_all()
        self._store.initialize_with_seed(create_sample_tasks(translate))
