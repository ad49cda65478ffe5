# src/taskdash/tasks/task_persistence.py

"""
Persistence adapter.

Mirrors the store's task collection into a key-value medium and restores it
at startup. Only the tasks subtree is written; loading/error flags are not.

Snapshot layout (one key, default "persist:taskdash"):

    {"tasks": [{"id": ..., "title": ..., "dueDate": ..., "assignedTo": ...}, ...]}
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Iterable

from ..core.ports import KeyValueStorage
from .task_models import Task, TaskFormatError
from .task_store import StoreChange, TaskStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "persist:taskdash"
PERSISTED_SUBTREE = "tasks"

_STORAGE_ERRORS = (OSError, ValueError, sqlite3.Error)


def serialize_state(tasks: Iterable[Task]) -> str:
    return json.dumps(
        {PERSISTED_SUBTREE: [t.to_dict() for t in tasks]},
        ensure_ascii=False,
    )


def deserialize_state(raw: str) -> list[Task]:
    """Parse a snapshot produced by serialize_state. Raises TaskFormatError."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TaskFormatError(f"snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise TaskFormatError("snapshot must be a JSON object")

    records = data.get(PERSISTED_SUBTREE)
    if not isinstance(records, list):
        raise TaskFormatError(f"snapshot has no {PERSISTED_SUBTREE!r} array")

    return [Task.from_dict(r) for r in records]


class TaskPersistence:
    """
    Bridges a TaskStore and a KeyValueStorage.

    Usage:
        persistence = TaskPersistence(store, storage)
        persistence.rehydrate()   # before anything reads the store
        persistence.attach()      # from now on every task change is written
    """

    def __init__(
        self,
        store: TaskStore,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._store = store
        self._storage = storage
        self._key = key
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, change: StoreChange) -> None:
        if change.tasks_changed:
            self.save(change.tasks)

    def save(self, tasks: Iterable[Task]) -> bool:
        """Write the snapshot. Failures are logged and reported as False."""
        snapshot = list(tasks)
        try:
            self._storage.set_item(self._key, serialize_state(snapshot))
        except _STORAGE_ERRORS:
            logger.exception("Failed to persist %s tasks under key=%s", len(snapshot), self._key)
            return False
        logger.debug("Persisted %s tasks under key=%s", len(snapshot), self._key)
        return True

    def load(self) -> list[Task] | None:
        """
        Read the snapshot.

        Returns None when nothing is stored or the stored value cannot be parsed.
        """
        try:
            raw = self._storage.get_item(self._key)
        except _STORAGE_ERRORS:
            logger.exception("Failed to read persisted tasks key=%s", self._key)
            return None

        if raw is None:
            logger.info("No persisted tasks under key=%s", self._key)
            return None

        try:
            return deserialize_state(raw)
        except TaskFormatError as e:
            logger.warning("Ignoring corrupt task snapshot key=%s: %s", self._key, e)
            return None

    def rehydrate(self) -> bool:
        """Replace the store's collection with the persisted one, if any."""
        tasks = self.load()
        if tasks is None:
            return False
        self._store.set_tasks(tasks)
        logger.info("Rehydrated %s tasks from key=%s", len(tasks), self._key)
        return True

    def purge(self) -> None:
        try:
            self._storage.remove_item(self._key)
        except _STORAGE_ERRORS:
            logger.exception("Failed to remove persisted tasks key=%s", self._key)
