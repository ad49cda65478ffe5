# tests/test_task_persistence.py

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from taskdash.cli.bootstrap import create_initial_state
from taskdash.storage.kv_store import JsonFileStorage, MemoryStorage, SqliteStorage, open_storage
from taskdash.tasks.task_models import TaskFormatError, TaskPriority, TaskStatus
from taskdash.tasks.task_persistence import TaskPersistence, deserialize_state, serialize_state
from taskdash.tasks.task_store import TaskStore

from .fakes import FailingStorage, make_task

KEY = "persist:test"


def test_serialize_roundtrip_and_layout() -> None:
    tasks = [
        make_task("a", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH, title="Ünïcode"),
        make_task("b"),
    ]
    raw = serialize_state(tasks)

    assert deserialize_state(raw) == tasks
    data = json.loads(raw)
    assert list(data) == ["tasks"]
    assert data["tasks"][0] == {
        "id": "a",
        "title": "Ünïcode",
        "description": tasks[0].description,
        "status": "in-progress",
        "priority": "high",
        "dueDate": tasks[0].due_date,
        "assignedTo": tasks[0].assigned_to,
    }


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[]",
        '{"tasks": {}}',
        '{"tasks": [{"id": "1"}]}',
        '{"tasks": [{"id": "1", "title": "t", "description": "d", "status": "done",'
        ' "priority": "low", "dueDate": "x", "assignedTo": "y"}]}',
    ],
)
def test_deserialize_rejects_bad_snapshots(raw: str) -> None:
    with pytest.raises(TaskFormatError):
        deserialize_state(raw)


def test_attached_adapter_mirrors_task_changes_only(store: TaskStore) -> None:
    storage = MemoryStorage()
    persistence = TaskPersistence(store, storage, key=KEY)
    persistence.attach()

    store.add_task(make_task("a"))
    assert deserialize_state(storage.get_item(KEY)) == [make_task("a")]

    # Flag changes are not persisted.
    storage.remove_item(KEY)
    store.set_loading(True)
    store.set_error("boom")
    assert storage.get_item(KEY) is None

    store.update_task("a", title="New title")
    saved = deserialize_state(storage.get_item(KEY))
    assert saved[0].title == "New title"
    assert "loading" not in storage.get_item(KEY)

    persistence.detach()
    store.delete_task("a")
    assert len(deserialize_state(storage.get_item(KEY))) == 1


def test_rehydrate_restores_previous_session() -> None:
    storage = MemoryStorage()
    first = TaskStore()
    p1 = TaskPersistence(first, storage, key=KEY)
    p1.attach()
    first.add_task(make_task("old"))
    first.add_task(make_task("new"))
    first.dispose()

    second = TaskStore()
    assert TaskPersistence(second, storage, key=KEY).rehydrate() is True
    assert [t.id for t in second.tasks] == ["new", "old"]


def test_rehydrate_with_nothing_stored_leaves_store_empty(store: TaskStore) -> None:
    assert TaskPersistence(store, MemoryStorage(), key=KEY).rehydrate() is False
    assert store.is_empty()


def test_rehydrate_corrupt_snapshot_falls_back_to_empty(store: TaskStore, caplog) -> None:
    storage = MemoryStorage({KEY: "{definitely not json"})

    assert TaskPersistence(store, storage, key=KEY).rehydrate() is False
    assert store.is_empty()
    assert "corrupt task snapshot" in caplog.text


def test_storage_failures_are_logged_not_raised(store: TaskStore, caplog) -> None:
    persistence = TaskPersistence(store, FailingStorage(), key=KEY)

    assert persistence.rehydrate() is False
    persistence.attach()
    store.add_task(make_task("a"))
    persistence.purge()

    assert [t.id for t in store.tasks] == ["a"]
    assert "Failed to persist" in caplog.text


def test_purge_removes_key(store: TaskStore) -> None:
    storage = MemoryStorage()
    persistence = TaskPersistence(store, storage, key=KEY)
    persistence.save([make_task("a")])

    persistence.purge()

    assert storage.get_item(KEY) is None


@pytest.mark.parametrize("backend", ["json", "sqlite"])
def test_file_backends_survive_reopen(tmp_path: Path, backend: str) -> None:
    path = tmp_path / f"storage.{backend}"
    storage = open_storage(backend, path)
    storage.set_item(KEY, "value-1")
    storage.set_item("other", "value-2")
    storage.set_item(KEY, "value-3")

    reopened = open_storage(backend, path)
    assert reopened.get_item(KEY) == "value-3"
    assert sorted(reopened.keys()) == sorted(["other", KEY])

    reopened.remove_item(KEY)
    assert open_storage(backend, path).get_item(KEY) is None


def test_json_storage_rewrites_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("garbage", "utf-8")
    storage = JsonFileStorage(path)

    with pytest.raises(ValueError):
        storage.get_item(KEY)

    storage.set_item(KEY, "ok")
    assert storage.get_item(KEY) == "ok"


def test_corrupt_sqlite_file_fails_per_call_not_on_open(tmp_path: Path, caplog) -> None:
    db = tmp_path / "storage.sqlite3"
    db.write_text("this is not an sqlite database\n" * 20, "utf-8")
    storage = SqliteStorage(db)

    with pytest.raises(sqlite3.DatabaseError):
        storage.get_item(KEY)

    store = TaskStore()
    persistence = TaskPersistence(store, storage, key=KEY)
    assert persistence.rehydrate() is False
    assert persistence.save([make_task("a")]) is False
    assert "Failed to read persisted tasks" in caplog.text


def test_startup_survives_corrupt_sqlite_storage(settings, caplog) -> None:
    db = settings.data_dir / "storage.sqlite3"
    db.write_text("this is not an sqlite database\n" * 20, "utf-8")
    settings.storage_backend = "sqlite"
    settings.storage_path = db

    state = create_initial_state(settings=settings)

    assert [t.id for t in state.store.tasks] == ["1", "2", "3", "4", "5"]
    assert "Failed to persist" in caplog.text
    state.dispose()


def test_sqlite_storage_end_to_end_with_adapter(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    store = TaskStore()
    TaskPersistence(store, SqliteStorage(db), key=KEY).attach()
    store.add_task(make_task("a"))

    fresh = TaskStore()
    TaskPersistence(fresh, SqliteStorage(db), key=KEY).rehydrate()
    assert fresh.tasks == store.tasks


def test_open_storage_rejects_unknown_backend(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        open_storage("redis", tmp_path / "x")
