# src/taskmate/tasks/task_store.py

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from ..core.events import (
    Event,
    EventDispatcher,
    StatusChanged,
    StoreChanged,
    TaskCreated,
    TaskDeleted,
    TaskUpdated,
)
from .task_models import Priority, Subtask, Task, TaskStatus
from .task_persistence import TaskPersistence

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _coerce_subtasks(raw: Iterable[Any] | None) -> list[Subtask]:
    out: list[Subtask] = []
    for item in raw or []:
        if isinstance(item, Subtask):
            out.append(Subtask(text=item.text, done=item.done))
        elif isinstance(item, str):
            if item.strip():
                out.append(Subtask(text=item.strip()))
        elif isinstance(item, dict):
            text = str(item.get("text") or "").strip()
            if text:
                out.append(Subtask(text=text, done=bool(item.get("done", False))))
    return out


class TaskStore:
    """
    The canonical in-memory task collection.

    Order: newly created tasks are prepended; replaced (edited) tasks keep their slot.

    Every mutating method:
    - builds the next collection without touching the current one,
    - saves it through the persistence adapter and only then swaps it in,
    - publishes the specific event(s) and then StoreChanged.

    A failed save leaves the in-memory collection as it was.

    Unknown ids are silently ignored by every method (stale UI references).
    """

    def __init__(self, persistence: TaskPersistence, dispatcher: EventDispatcher | None = None) -> None:
        self._persistence = persistence
        self._dispatcher = dispatcher or EventDispatcher()
        self._tasks: list[Task] = persistence.load()
        logger.info("TaskStore ready total=%d", len(self._tasks))

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    def _new_id(self) -> str:
        candidate = time.time_ns() // 1_000_000
        taken = {t.id for t in self._tasks}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _replaced(self, idx: int, task: Task) -> list[Task]:
        tasks = list(self._tasks)
        tasks[idx] = task
        return tasks

    def _commit(self, tasks: list[Task], *events: Event) -> None:
        self._persistence.save(tasks)
        self._tasks = tasks
        for ev in events:
            self._dispatcher.publish(ev)
        self._dispatcher.publish(StoreChanged(task_count=len(self._tasks)))

    # ---- queries ----

    def all(self) -> list[Task]:
        """Snapshot of the collection (deep copies; callers cannot mutate the store)."""
        return copy.deepcopy(self._tasks)

    def count(self) -> int:
        return len(self._tasks)

    def find_by_id(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return copy.deepcopy(self._tasks[idx]) if idx >= 0 else None

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, str) and self._index_of(task_id) >= 0

    # ---- mutations ----

    def create(
        self,
        *,
        title: str,
        id: str | None = None,
        priority: Priority | str | None = None,
        notes: str | None = None,
        due_date: str | None = None,
        subtasks: Iterable[Subtask | str | dict[str, Any]] | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """
        Create a task, or replace the task with the same id in place.

        New task: status=todo, created_at=now, id generated if absent, prepended.
        Existing id: fields are replaced at the same position; created_at is kept.
        """
        if not title or not title.strip():
            raise ValueError("title is required")

        task_id = str(id).strip() if id is not None and str(id).strip() else None
        idx = self._index_of(task_id) if task_id else -1

        task = Task(
            id=task_id or self._new_id(),
            title=title.strip(),
            created_at=self._tasks[idx].created_at if idx >= 0 else _now_iso(),
            priority=Priority.from_raw(priority),
            notes=(notes or "").strip(),
            due_date=(due_date or "").strip() or None,
            status=TaskStatus.TODO if status is None else status,
            subtasks=_coerce_subtasks(subtasks),
        )

        if idx >= 0:
            self._commit(self._replaced(idx, task), TaskUpdated(task_id=task.id))
            logger.debug("Task replaced id=%s index=%d", task.id, idx)
        else:
            self._commit([task, *self._tasks], TaskCreated(task_id=task.id))
            logger.debug("Task created id=%s priority=%s", task.id, task.priority.value)

        return copy.deepcopy(task)

    def delete(self, task_id: str) -> None:
        idx = self._index_of(task_id)
        if idx < 0:
            logger.debug("delete: task id=%s not found (ignored)", task_id)
            return
        self._commit(self._tasks[:idx] + self._tasks[idx + 1 :], TaskDeleted(task_id=task_id))
        logger.debug("Task deleted id=%s", task_id)

    def set_status(self, task_id: str, new_status: TaskStatus) -> None:
        """Set status unconditionally; a same-status write still persists and notifies."""
        idx = self._index_of(task_id)
        if idx < 0:
            logger.debug("set_status: task id=%s not found (ignored)", task_id)
            return
        old = self._tasks[idx].status
        task = replace(self._tasks[idx], status=TaskStatus(new_status))
        self._commit(
            self._replaced(idx, task),
            StatusChanged(task_id=task_id, old_status=old.value, new_status=task.status.value),
        )
        logger.debug("Task %s status %s -> %s", task_id, old.value, task.status.value)

    def toggle_done(self, task_id: str) -> None:
        """done -> todo, anything else -> done."""
        task = self.find_by_id(task_id)
        if task is None:
            return
        target = TaskStatus.TODO if task.status == TaskStatus.DONE else TaskStatus.DONE
        self.set_status(task_id, target)

    def toggle_subtask(self, task_id: str, index: int) -> None:
        """Flip one checklist item (0-based index); out of range is a no-op."""
        idx = self._index_of(task_id)
        if idx < 0:
            return
        task = copy.deepcopy(self._tasks[idx])
        if not 0 <= index < len(task.subtasks):
            logger.debug("toggle_subtask: index %d out of range for task %s", index, task_id)
            return
        task.subtasks[index].done = not task.subtasks[index].done
        self._commit(self._replaced(idx, task), TaskUpdated(task_id=task_id))
