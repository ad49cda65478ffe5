# src/taskdash/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDASH"

STORAGE_BACKENDS = ("json", "sqlite", "memory")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Persistence ----
    data_dir: Path
    storage_backend: str
    storage_path: Path
    storage_key: str

    # ---- Behaviour ----
    language: str
    seed_on_empty: bool
    simulated_delay_ms: int

    # ---- Export ----
    export_dir: Path

    @property
    def simulated_delay_seconds(self) -> float:
        return max(0, self.simulated_delay_ms) / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdash").strip() or "taskdash"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdash"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "json")
        default_file = "storage.sqlite3" if storage_backend == "sqlite" else "storage.json"
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / default_file)
        storage_key = _env(_k("STORAGE_KEY"), f"persist:{app_name}").strip() or f"persist:{app_name}"

        language = _env(_k("LANGUAGE"), "en").strip() or "en"
        seed_on_empty = _env_bool(_k("SEED_ON_EMPTY"), True)
        simulated_delay_ms = _env_int(_k("SIMULATED_DELAY_MS"), 500)

        export_dir = _env_path(_k("EXPORT_DIR"), data_dir / "exports")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_key=storage_key,
            language=language,
            seed_on_empty=seed_on_empty,
            simulated_delay_ms=simulated_delay_ms,
            export_dir=export_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
