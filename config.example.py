# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file),
see src/taskflow/config.py. This file lists every variable the app reads.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Logging level (default: INFO).",
    # Connectors
    "TASKFLOW_CONSOLE_ENABLED": "Enable the console connector (true/false, default: true).",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory (default: .local/taskflow).",
    "TASKFLOW_BOARD_DB_PATH": "Board SQLite path (default: <data_dir>/board.sqlite3).",
    "TASKFLOW_PERSIST": "Save the board to SQLite (true/false, default: true).",
    # Board
    "TASKFLOW_DEFAULT_SCOPE": "Scope the console opens on (default: inbox).",
    # Drag activation
    "TASKFLOW_POINTER_DISTANCE": "Pointer travel in px before a drag starts (default: 8).",
    "TASKFLOW_TOUCH_DELAY_MS": "Touch hold in ms before a drag starts (default: 200).",
    "TASKFLOW_TOUCH_TOLERANCE": "Touch movement in px allowed during the hold (default: 8).",
    "TASKFLOW_REVERT_ON_CANCEL": (
        "Move a task back to where the drag started when the drag is cancelled (default: false)."
    ),
}
