# src/taskmate/timer/focus_timer.py

from __future__ import annotations

"""
Focus timer engine.

A countdown state machine (idle / running) bound to at most one task.
The task link is by id only: the timer never owns the task, and a deleted
task simply drops the focus.

The repeating tick comes from an injected TickScheduler; the handle is
cancelled synchronously on stop/reset/set_preset/shutdown so no late tick
can decrement a timer that was just reset.
"""

import logging

from ..core.events import (
    EventDispatcher,
    TaskDeleted,
    TimerCompleted,
    TimerStarted,
    TimerStopped,
    TimerTicked,
)
from ..core.ports import RepeatingHandle, TickScheduler
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

COMPLETION_MESSAGE = "Focus Session Complete! Take a break."
DEFAULT_MINUTES = 25


class FocusTimer:
    def __init__(
        self,
        store: TaskStore,
        scheduler: TickScheduler,
        dispatcher: EventDispatcher,
        *,
        default_minutes: int = DEFAULT_MINUTES,
        tick_interval_seconds: float = 1.0,
    ) -> None:
        if int(default_minutes) <= 0:
            raise ValueError("default_minutes must be > 0")
        self._store = store
        self._scheduler = scheduler
        self._dispatcher = dispatcher
        self._tick_interval = float(tick_interval_seconds)

        self._initial = int(default_minutes) * 60
        self._time_left = self._initial
        self._focused_task_id: str | None = None
        self._handle: RepeatingHandle | None = None

        self._unsubscribe = dispatcher.subscribe(TaskDeleted, self._on_task_deleted)

    # ---- read-only state ----

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def time_left_seconds(self) -> int:
        return self._time_left

    @property
    def initial_duration_seconds(self) -> int:
        return self._initial

    @property
    def focused_task_id(self) -> str | None:
        return self._focused_task_id

    @property
    def focused_task(self) -> Task | None:
        """Resolve the back-link; a dangling id reads as unfocused."""
        if self._focused_task_id is None:
            return None
        return self._store.find_by_id(self._focused_task_id)

    def _drop_dangling_focus(self) -> None:
        if self._focused_task_id is not None and self._focused_task_id not in self._store:
            logger.debug("Focused task %s no longer exists; unfocusing.", self._focused_task_id)
            self._focused_task_id = None

    # ---- transitions ----

    def start(self) -> None:
        if self.running:
            return

        self._drop_dangling_focus()
        if self._focused_task_id is None:
            first = next((t for t in self._store.all() if t.status != TaskStatus.DONE), None)
            if first is not None:
                self._focused_task_id = first.id

        if self._time_left <= 0:
            self._time_left = self._initial

        self._handle = self._scheduler.call_repeating(self._tick_interval, self.tick)
        logger.info("Focus timer started left=%ss task=%s", self._time_left, self._focused_task_id)
        self._dispatcher.publish(TimerStarted(task_id=self._focused_task_id, time_left_seconds=self._time_left))

    def tick(self) -> None:
        if not self.running:
            return
        if self._time_left > 0:
            self._time_left -= 1
            self._dispatcher.publish(
                TimerTicked(time_left_seconds=self._time_left, initial_duration_seconds=self._initial)
            )
        if self._time_left == 0:
            self.stop(COMPLETION_MESSAGE)

    def stop(self, message: str | None = None) -> None:
        """
        Cancel the tick and go idle.

        With a message (natural completion), publish TimerCompleted so the
        status rules can notify and offer to mark the focused task done.
        Without a message (manual pause) nothing else happens.
        """
        was_running = self.running
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        if was_running:
            logger.info("Focus timer stopped left=%ss", self._time_left)
            self._dispatcher.publish(TimerStopped(time_left_seconds=self._time_left))

        self._drop_dangling_focus()
        if message:
            self._dispatcher.publish(TimerCompleted(task_id=self._focused_task_id, message=message))

    def toggle(self) -> None:
        """Start/pause button."""
        if self.running:
            self.stop()
        else:
            self.start()

    def reset(self) -> None:
        self.stop()
        self._time_left = self._initial

    def set_preset(self, minutes: int) -> None:
        minutes = int(minutes)
        if minutes <= 0:
            raise ValueError("preset minutes must be > 0")
        self.set_duration_seconds(minutes * 60)

    def set_duration_seconds(self, seconds: int) -> None:
        """Stop, then set both the session length and the remaining time."""
        seconds = int(seconds)
        if seconds <= 0:
            raise ValueError("duration must be > 0 seconds")
        self.stop()
        self._initial = seconds
        self._time_left = seconds
        logger.debug("Focus timer duration %ss", seconds)

    def focus_on(self, task_id: str) -> bool:
        """Focus on an existing task; remaining time is untouched."""
        if task_id not in self._store:
            return False
        self._focused_task_id = task_id
        return True

    def unfocus(self) -> None:
        self._focused_task_id = None

    def shutdown(self) -> None:
        """Teardown: cancel any pending tick and detach from the dispatcher."""
        self.stop()
        self._unsubscribe()

    # ---- event handlers ----

    def _on_task_deleted(self, event: TaskDeleted) -> None:
        if event.task_id == self._focused_task_id:
            logger.debug("Focused task %s deleted; unfocusing.", event.task_id)
            self._focused_task_id = None
