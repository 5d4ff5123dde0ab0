# src/taskmate/views/projections.py

"""
Read-only projections over a task snapshot.

Everything here is a pure function of its arguments: no store access,
no side effects. The renderer calls these after every StoreChanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from ..tasks.task_models import Task, TaskStatus

CHART_LABELS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.DOING: "In Progress",
    TaskStatus.DONE: "Done",
}


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


def _matches_status(task: Task, status_filter: StatusFilter) -> bool:
    if status_filter == StatusFilter.ACTIVE:
        return task.status != TaskStatus.DONE
    if status_filter == StatusFilter.COMPLETED:
        return task.status == TaskStatus.DONE
    return True


def filter_tasks(
    tasks: Iterable[Task],
    search: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
) -> list[Task]:
    """Case-insensitive title search AND status filter, store order preserved."""
    needle = (search or "").lower()
    return [t for t in tasks if needle in t.title.lower() and _matches_status(t, status_filter)]


def group_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    """Kanban columns. Tasks with a status outside the three columns are not shown."""
    columns: dict[TaskStatus, list[Task]] = {s: [] for s in TaskStatus}
    for t in tasks:
        bucket = columns.get(t.status)
        if bucket is not None:
            bucket.append(t)
    return columns


def count_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, int]:
    counts: dict[TaskStatus, int] = {s: 0 for s in TaskStatus}
    for t in tasks:
        if t.status in counts:
            counts[t.status] += 1
    return counts


def chart_series(counts: dict[TaskStatus, int]) -> tuple[list[str], list[int]]:
    """Labels and values in fixed column order (input of the status chart)."""
    order = list(TaskStatus)
    return [CHART_LABELS[s] for s in order], [counts.get(s, 0) for s in order]


def focus_candidates(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.status != TaskStatus.DONE]


def format_clock(seconds: int) -> str:
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def ring_progress(time_left_seconds: int, initial_duration_seconds: int) -> float:
    """Elapsed share of the session in [0, 1]."""
    if initial_duration_seconds <= 0:
        return 0.0
    ratio = (initial_duration_seconds - time_left_seconds) / initial_duration_seconds
    return min(1.0, max(0.0, ratio))


def subtask_summary(task: Task) -> str | None:
    """'2/4 steps', or None when the task has no checklist."""
    if task.total_steps == 0:
        return None
    return f"{task.done_steps}/{task.total_steps} steps"

