# tests/test_task_store.py

from __future__ import annotations

import json

from taskdash.storage.kv_store import MemoryStorage
from taskdash.tasks.task_models import Task, TaskPriority, TaskStatus
from taskdash.tasks.task_persistence import TaskPersistence
from taskdash.tasks.task_store import TaskStore

from .fakes import RecordingListener, make_task


def test_add_task_inserts_at_head(store: TaskStore) -> None:
    for i in range(5):
        store.add_task(make_task(str(i)))
        assert store.tasks[0].id == str(i)

    assert len(store) == 5
    assert [t.id for t in store.tasks] == ["4", "3", "2", "1", "0"]


def test_add_task_with_plain_string_enums_is_stored_and_persisted(store: TaskStore) -> None:
    storage = MemoryStorage()
    TaskPersistence(store, storage, key="persist:test").attach()
    task = Task(
        id="x",
        title="Plain strings",
        description="Status and priority given as str",
        status="pending",
        priority="low",
        due_date="2024-12-20",
        assigned_to="Ann",
    )

    store.add_task(task)

    assert store.tasks[0].status is TaskStatus.PENDING
    assert store.tasks[0].priority is TaskPriority.LOW
    saved = json.loads(storage.get_item("persist:test"))
    assert saved["tasks"][0]["status"] == "pending"
    assert saved["tasks"][0]["priority"] == "low"


def test_get_task_finds_by_id(store: TaskStore) -> None:
    store.set_tasks([make_task("a"), make_task("b")])

    assert store.get_task("b") == make_task("b")
    assert store.get_task("zzz") is None


def test_create_task_generates_distinct_ids(store: TaskStore) -> None:
    store.add_task(make_task("1"))
    fields = dict(
        title="Fix bug",
        description="Crash when saving a task",
        due_date="2024-12-20",
        assigned_to="Ann",
    )

    a = store.create_task(**fields)
    b = store.create_task(**fields)

    assert a.id != b.id
    assert {a.id, b.id}.isdisjoint({"1"})
    assert store.tasks[0] == b
    assert store.tasks[1] == a
    assert len({t.id for t in store.tasks}) == 3


def test_update_keeps_id_and_position(store: TaskStore) -> None:
    store.set_tasks([make_task("a"), make_task("b"), make_task("c")])

    store.update_task("b", title="Renamed", status="completed", priority=TaskPriority.HIGH)

    assert [t.id for t in store.tasks] == ["a", "b", "c"]
    updated = store.tasks[1]
    assert updated.id == "b"
    assert updated.title == "Renamed"
    assert updated.status is TaskStatus.COMPLETED
    assert updated.priority is TaskPriority.HIGH
    assert updated.description == make_task("b").description


def test_update_ignores_id_and_unknown_fields(store: TaskStore) -> None:
    store.set_tasks([make_task("a")])

    store.update_task("a", id="zzz", color="red", status="not-a-status", title="Kept")

    assert store.tasks[0].id == "a"
    assert store.tasks[0].title == "Kept"
    assert store.tasks[0].status is TaskStatus.PENDING


def test_update_and_delete_unknown_id_are_noops(store: TaskStore) -> None:
    store.set_tasks([make_task("a"), make_task("b")])
    before = store.tasks
    listener = RecordingListener()
    store.subscribe(listener)

    store.update_task("missing", title="x")
    store.delete_task("missing")

    assert store.tasks == before
    assert listener.changes == []


def test_delete_removes_only_matching_task(store: TaskStore) -> None:
    store.set_tasks([make_task("a"), make_task("b"), make_task("c")])

    store.delete_task("b")

    assert [t.id for t in store.tasks] == ["a", "c"]


def test_set_tasks_and_seed_replace_collection_and_reset_flags(store: TaskStore) -> None:
    store.set_loading(True)
    store.set_error("boom")
    store.set_tasks([make_task("x"), make_task("y")])

    assert [t.id for t in store.tasks] == ["x", "y"]
    assert store.loading is False
    assert store.error is None

    store.set_error("again")
    store.initialize_with_seed([make_task("s")])
    assert [t.id for t in store.tasks] == ["s"]
    assert store.error is None


def test_set_tasks_does_not_check_duplicates(store: TaskStore) -> None:
    store.set_tasks([make_task("dup"), make_task("dup")])
    assert len(store) == 2


def test_status_flags(store: TaskStore) -> None:
    store.set_loading(True)
    assert store.loading is True

    store.set_error("failed")
    assert store.error == "failed"
    assert store.loading is False

    store.clear_error()
    assert store.error is None


def test_mutations_clear_error(store: TaskStore) -> None:
    store.set_error("old")
    store.add_task(make_task("a"))
    assert store.error is None

    store.set_error("old")
    store.delete_task("missing")
    assert store.error is None


def test_clear_all(store: TaskStore) -> None:
    store.set_tasks([make_task("a")])
    store.set_loading(True)

    store.clear_all()

    assert store.is_empty()
    assert store.loading is False
    assert store.error is None


def test_snapshot_is_not_affected_by_later_mutations(store: TaskStore) -> None:
    store.set_tasks([make_task("a")])
    snapshot = store.tasks

    store.add_task(make_task("b"))
    store.update_task("a", title="Changed")

    assert [t.id for t in snapshot] == ["a"]
    assert snapshot[0].title == make_task("a").title


def test_listeners_get_changes_and_can_unsubscribe(store: TaskStore) -> None:
    listener = RecordingListener()
    unsubscribe = store.subscribe(listener)

    store.add_task(make_task("a"))
    store.set_loading(True)

    assert listener.actions == ["add_task", "set_loading"]
    assert listener.changes[0].tasks_changed is True
    assert listener.changes[0].tasks == store.tasks
    assert listener.changes[1].tasks_changed is False

    unsubscribe()
    store.delete_task("a")
    assert len(listener.changes) == 2


def test_failing_listener_does_not_break_mutation(store: TaskStore) -> None:
    def broken(_change) -> None:
        raise RuntimeError("listener bug")

    good = RecordingListener()
    store.subscribe(broken)
    store.subscribe(good)

    store.add_task(make_task("a"))

    assert len(store) == 1
    assert good.actions == ["add_task"]


def test_disposed_store_ignores_mutations() -> None:
    store = TaskStore([make_task("a")])
    listener = RecordingListener()
    store.subscribe(listener)

    store.dispose()
    store.add_task(make_task("b"))
    store.clear_all()

    assert [t.id for t in store.tasks] == ["a"]
    assert listener.changes == []
