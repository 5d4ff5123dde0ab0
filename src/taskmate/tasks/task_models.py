# src/taskmate/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Workflow status of a task.

    Transitions are free-form: any status may move to any other status.
    The value doubles as the kanban column name.
    """

    TODO = "todo"
    DOING = "doing"
    DONE = "done"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        """Lenient conversion used when reading stored data (unknown -> todo)."""
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.TODO

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Strict conversion used for user input (column names and aliases)."""
        key = (raw or "").strip().lower()
        status = _STATUS_ALIASES.get(key)
        if status is None:
            raise ValueError(f"unknown status: {raw!r}")
        return status


_STATUS_ALIASES: dict[str, TaskStatus] = {
    "t": TaskStatus.TODO,
    "todo": TaskStatus.TODO,
    "to-do": TaskStatus.TODO,
    "ip": TaskStatus.DOING,
    "doing": TaskStatus.DOING,
    "in-progress": TaskStatus.DOING,
    "d": TaskStatus.DONE,
    "done": TaskStatus.DONE,
}


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Strict conversion used for user input."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            raise ValueError(f"unknown priority: {raw!r} (use low, medium or high)") from None


@dataclass(slots=True)
class Subtask:
    text: str
    done: bool = False


@dataclass(slots=True)
class Task:
    id: str
    title: str
    created_at: str

    priority: Priority = Priority.MEDIUM
    notes: str = ""
    due_date: str | None = None
    status: TaskStatus = TaskStatus.TODO
    subtasks: list[Subtask] = field(default_factory=list)

    # Progress is always derived from subtasks, never stored.
    @property
    def total_steps(self) -> int:
        return len(self.subtasks)

    @property
    def done_steps(self) -> int:
        return sum(1 for s in self.subtasks if s.done)

    @property
    def progress_percent(self) -> float:
        total = self.total_steps
        if total == 0:
            return 0.0
        return self.done_steps / total * 100.0

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE
