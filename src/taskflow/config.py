# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Drag activation thresholds are tunable without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    board_db_path: Path
    persist: bool

    # ---- Board ----
    default_scope: str

    # ---- Drag activation ----
    pointer_distance: float
    touch_delay_ms: float
    touch_tolerance: float
    revert_on_cancel: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskflow").strip() or "taskflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        board_db_path = _env_path(_k("BOARD_DB_PATH"), data_dir / "board.sqlite3")
        persist = _env_bool(_k("PERSIST"), True)

        default_scope = _env(_k("DEFAULT_SCOPE"), "inbox").strip() or "inbox"

        # Activation defaults: 8px pointer travel, 200ms touch hold within 8px.
        pointer_distance = max(0.0, _env_float(_k("POINTER_DISTANCE"), 8.0))
        touch_delay_ms = max(0.0, _env_float(_k("TOUCH_DELAY_MS"), 200.0))
        touch_tolerance = max(0.0, _env_float(_k("TOUCH_TOLERANCE"), 8.0))
        revert_on_cancel = _env_bool(_k("REVERT_ON_CANCEL"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            board_db_path=board_db_path,
            persist=persist,
            default_scope=default_scope,
            pointer_distance=pointer_distance,
            touch_delay_ms=touch_delay_ms,
            touch_tolerance=touch_tolerance,
            revert_on_cancel=revert_on_cancel,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
