# src/taskmate/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.events import EventDispatcher
from ..core.ports import KeyValueStore, UserPrompt
from ..tasks.task_persistence import DEFAULT_THEME, TaskPersistence
from ..tasks.task_store import TaskStore
from ..tasks.transitions import StatusRules
from ..timer.focus_timer import FocusTimer
from ..views.projections import StatusFilter


@dataclass
class AppState:
    """
    Everything the app owns, passed explicitly to connectors and commands.

    Mutations go through store / timer / rules only; the view fields below
    are presentation choices (current filter, search, theme), not task data.
    """

    # Settings object (real Settings or a test double).
    settings: Any

    dispatcher: EventDispatcher
    kv: KeyValueStore
    persistence: TaskPersistence
    store: TaskStore
    rules: StatusRules
    timer: FocusTimer
    prompt: UserPrompt

    theme: str = DEFAULT_THEME
    list_filter: StatusFilter = StatusFilter.ALL
    list_search: str = ""
