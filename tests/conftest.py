# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdash.cli.bootstrap import create_initial_state
from taskdash.core.state import AppState
from taskdash.storage.kv_store import MemoryStorage
from taskdash.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdash-test",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "storage.json",
        storage_key="persist:taskdash-test",
        export_dir=tmp_path / "exports",
        language="en",
        seed_on_empty=True,
        simulated_delay_ms=0,
        simulated_delay_seconds=0.0,
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: MemoryStorage) -> Iterator[AppState]:
    """AppState wired with in-memory storage; seeded with the five samples."""
    st = create_initial_state(settings=settings, storage=storage)
    yield st
    st.dispose()


@pytest.fixture()
def store() -> Iterator[TaskStore]:
    s = TaskStore()
    yield s
    s.dispose()
