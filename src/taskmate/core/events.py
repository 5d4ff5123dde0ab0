# src/taskmate/core/events.py

"""
Explicit event types and a single-threaded dispatcher.

Store and timer publish events here; the renderer and the status rules
subscribe instead of being called directly. Delivery is synchronous, in
subscription order, on the thread that publishes (the event loop thread).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Event:
    pass


# ---- task store ----


@dataclass(slots=True, frozen=True)
class TaskCreated(Event):
    task_id: str


@dataclass(slots=True, frozen=True)
class TaskUpdated(Event):
    task_id: str


@dataclass(slots=True, frozen=True)
class TaskDeleted(Event):
    task_id: str


@dataclass(slots=True, frozen=True)
class StatusChanged(Event):
    task_id: str
    old_status: str
    new_status: str


@dataclass(slots=True, frozen=True)
class StoreChanged(Event):
    """Published after every persisted mutation; views recompute on it."""

    task_count: int


# ---- focus timer ----


@dataclass(slots=True, frozen=True)
class TimerStarted(Event):
    task_id: str | None
    time_left_seconds: int


@dataclass(slots=True, frozen=True)
class TimerTicked(Event):
    time_left_seconds: int
    initial_duration_seconds: int


@dataclass(slots=True, frozen=True)
class TimerStopped(Event):
    time_left_seconds: int


@dataclass(slots=True, frozen=True)
class TimerCompleted(Event):
    task_id: str | None
    message: str


E = TypeVar("E", bound=Event)
Handler = Callable[[Any], None]


class EventDispatcher:
    def __init__(self) -> None:
        self._subs: list[tuple[type[Event], Handler]] = []

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register handler for event_type (and its subclasses). Returns an unsubscribe callable."""
        entry = (event_type, handler)
        self._subs.append(entry)

        def _unsubscribe() -> None:
            if entry in self._subs:
                self._subs.remove(entry)

        return _unsubscribe

    def publish(self, event: Event) -> None:
        # Snapshot: handlers may (un)subscribe while we deliver.
        for event_type, handler in list(self._subs):
            if not isinstance(event, event_type):
                continue
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed event=%s handler=%r", type(event).__name__, handler)
