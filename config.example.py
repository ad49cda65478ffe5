# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKDASH_APP_NAME": "App display name (default: taskdash).",
    "TASKDASH_LOG_LEVEL": "Console logging level (default: INFO).",
    # Persistence
    "TASKDASH_DATA_DIR": "Local data directory (default: .local/taskdash).",
    "TASKDASH_STORAGE_BACKEND": "json | sqlite | memory (default: json).",
    "TASKDASH_STORAGE_PATH": "Storage file (default: <data_dir>/storage.json or storage.sqlite3).",
    "TASKDASH_STORAGE_KEY": "Key holding the task snapshot (default: persist:<app_name>).",
    # Behaviour
    "TASKDASH_LANGUAGE": "Display language for sample tasks and labels: en | ru (default: en).",
    "TASKDASH_SEED_ON_EMPTY": "Load sample tasks when the store is empty (default: true).",
    "TASKDASH_SIMULATED_DELAY_MS": "Delay before edit/delete are applied (default: 500).",
    # Export
    "TASKDASH_EXPORT_DIR": "Directory for /export (default: <data_dir>/exports).",
}
