# src/taskdash/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage media and the localization layer swappable and makes testing easier.
"""

from typing import Protocol


class KeyValueStorage(Protocol):
    """Durable, synchronous string storage (localStorage-like)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class Translate(Protocol):
    """Localization lookup: message key -> display text in the active language."""

    def __call__(self, key: str) -> str: ...
