# src/taskmate/tasks/transitions.py

from __future__ import annotations

"""
Status transition rules.

Three UI gestures change a task's status:
- list checkbox      -> toggle between done and todo
- kanban drop        -> absolute move to the column's status (a drop on the
                        current column is still a persisted write)
- timer completion   -> notify, then ask whether to mark the focused task done

The rules do not own state; they route gestures into TaskStore operations
and use the injected UserPrompt for anything the user has to see or answer.
"""

import logging
from collections.abc import Callable

from ..core.events import EventDispatcher, TimerCompleted
from ..core.ports import UserPrompt
from .task_models import TaskStatus
from .task_store import TaskStore

logger = logging.getLogger(__name__)

MARK_DONE_QUESTION = "Mark focussed task as done?"
DELETE_QUESTION = "Are you sure?"


class StatusRules:
    def __init__(self, store: TaskStore, prompt: UserPrompt, *, confirm_delete: bool = True) -> None:
        self._store = store
        self._prompt = prompt
        self._confirm_delete = confirm_delete

    def attach(self, dispatcher: EventDispatcher) -> Callable[[], None]:
        """Subscribe to timer completion. Returns the unsubscribe callable."""
        return dispatcher.subscribe(TimerCompleted, self.on_timer_completed)

    def toggle_from_list(self, task_id: str) -> None:
        self._store.toggle_done(task_id)

    def drop_on_column(self, task_id: str, column: TaskStatus | str) -> None:
        status = column if isinstance(column, TaskStatus) else TaskStatus.parse(column)
        self._store.set_status(task_id, status)

    def on_timer_completed(self, event: TimerCompleted) -> None:
        self._prompt.notify(event.message)

        if not event.task_id:
            return
        if event.task_id not in self._store:
            logger.debug("Completed session referenced a deleted task id=%s", event.task_id)
            return

        if self._prompt.confirm(MARK_DONE_QUESTION):
            self._store.set_status(event.task_id, TaskStatus.DONE)
            logger.info("Focused task %s marked done after session.", event.task_id)

    def confirm_delete(self, task_id: str) -> bool:
        """Delete after a yes/no confirmation (skipped when disabled). Returns True if deleted."""
        if task_id not in self._store:
            return False
        if self._confirm_delete and not self._prompt.confirm(DELETE_QUESTION):
            return False
        self._store.delete(task_id)
        return True
