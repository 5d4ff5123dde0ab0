# src/taskmate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, store, rules and timer into AppState around one dispatcher.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.events import EventDispatcher
from ..core.ports import KeyValueStore, TickScheduler, UserPrompt
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_store import TaskStore
from ..tasks.transitions import StatusRules
from ..timer.focus_timer import FocusTimer
from ..timer.ticker import AsyncioTickScheduler

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    prompt: UserPrompt,
    settings=None,
    kv: KeyValueStore | None = None,
    scheduler: TickScheduler | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/storage/scheduler injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.db_path)

    dispatcher = EventDispatcher()
    persistence = TaskPersistence(kv)
    store = TaskStore(persistence, dispatcher)

    rules = StatusRules(store, prompt, confirm_delete=bool(getattr(settings, "confirm_delete", True)))
    rules.attach(dispatcher)

    timer = FocusTimer(
        store,
        scheduler or AsyncioTickScheduler(),
        dispatcher,
        default_minutes=int(getattr(settings, "default_focus_minutes", 25)),
        tick_interval_seconds=float(getattr(settings, "tick_interval_seconds", 1.0)),
    )

    state = AppState(
        settings=settings,
        dispatcher=dispatcher,
        kv=kv,
        persistence=persistence,
        store=store,
        rules=rules,
        timer=timer,
        prompt=prompt,
        theme=persistence.load_theme(),
    )
    logger.info("State ready tasks=%d theme=%s", store.count(), state.theme)
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort teardown (no exceptions should escape)."""
    try:
        state.timer.shutdown()
    except Exception:
        logger.exception("Timer shutdown failed.")

    try:
        close = getattr(state.kv, "close", None)
        if callable(close):
            close()
    except Exception:
        logger.debug("Storage close failed.", exc_info=True)
