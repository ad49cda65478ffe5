# src/taskdash/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_seed import SeedPolicy
from ..tasks.task_selectors import TaskFilters
from ..tasks.task_store import TaskStore
from .i18n import Translator

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Everything a front-end needs, passed around explicitly.

    The store is owned here; views and commands get it from the state object,
    never from a module-level global.
    """

    # Settings object (real Settings or a test double with the same attributes).
    settings: Any

    store: TaskStore
    persistence: TaskPersistence
    seed_policy: SeedPolicy
    translator: Translator

    filters: TaskFilters = field(default_factory=TaskFilters)

    @property
    def language(self) -> str:
        return self.translator.language

    def set_language(self, language: str) -> bool:
        """
        Switch the display language and re-run the seed check.

        Returns True if the switch caused the (empty) store to be seeded.
        """
        self.translator = Translator(language)
        logger.info("Language set to %s", self.translator.language)
        return self.seed_policy.on_language_changed(self.translator)

    def dispose(self) -> None:
        self.persistence.detach()
        self.store.dispose()
