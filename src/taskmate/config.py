# src/taskmate/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Everything has a sane default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

ENV_PREFIX = "TASKMATE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int_list(name: str, default: List[int]) -> List[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    out: List[int] = []
    for part in raw.replace(",", " ").split():
        try:
            value = int(part)
        except ValueError:
            continue
        if value > 0:
            out.append(value)
    return out or list(default)


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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    log_dir: Path
    export_dir: Path

    # ---- Focus timer ----
    default_focus_minutes: int
    timer_presets: List[int]
    tick_interval_seconds: float

    # ---- Behaviour ----
    confirm_delete: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskMate") or "TaskMate"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmate"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskmate.sqlite3")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        default_focus_minutes = _env_int(_k("FOCUS_MINUTES"), 25)
        if default_focus_minutes <= 0:
            default_focus_minutes = 25
        timer_presets = _env_int_list(_k("TIMER_PRESETS"), [15, 25, 45])
        tick_interval_seconds = _env_float(_k("TICK_SECONDS"), 1.0)
        if tick_interval_seconds <= 0:
            tick_interval_seconds = 1.0

        confirm_delete = _env_bool(_k("CONFIRM_DELETE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            log_dir=log_dir,
            export_dir=export_dir,
            default_focus_minutes=default_focus_minutes,
            timer_presets=timer_presets,
            tick_interval_seconds=tick_interval_seconds,
            confirm_delete=confirm_delete,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
