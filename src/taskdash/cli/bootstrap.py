# src/taskdash/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, store, persistence and seed policy into AppState,
- restores persisted tasks before anything reads the store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.i18n import Translator
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..storage.kv_store import open_storage
from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_seed import SeedPolicy
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Startup order matters:
    1) rehydrate from storage (may leave the store empty),
    2) attach persistence so later mutations are mirrored,
    3) run the seed check (only seeds an empty store).

    Keeping settings/storage injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = open_storage(settings.storage_backend, settings.storage_path)

    store = TaskStore()
    persistence = TaskPersistence(store, storage, key=settings.storage_key)
    persistence.rehydrate()
    persistence.attach()

    state = AppState(
        settings=settings,
        store=store,
        persistence=persistence,
        seed_policy=SeedPolicy(store, enabled=settings.seed_on_empty),
        translator=Translator(settings.language),
    )

    if state.seed_policy.ensure_seeded(state.translator):
        logger.info("First run: loaded sample tasks (%s)", state.language)

    logger.info("State ready tasks=%s language=%s", len(store), state.language)
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.persistence.save(state.store.tasks)
    except Exception:
        logger.exception("Final save failed.")
    state.dispose()
