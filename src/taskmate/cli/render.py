# src/taskmate/cli/render.py

"""
Plain-text rendering of projections.

Functions here only format what the projections return; they never touch
the store. Output is a single string so connectors decide where it goes.
Colors come from a Palette; the default PLAIN palette adds none.
"""

from __future__ import annotations

import shutil
import textwrap

from ..tasks.task_models import Task, TaskStatus
from ..views.projections import (
    CHART_LABELS,
    StatusFilter,
    chart_series,
    count_by_status,
    filter_tasks,
    focus_candidates,
    format_clock,
    group_by_status,
    ring_progress,
    subtask_summary,
)
from .theme import BOLD, PLAIN, Palette

EMPTY_LIST = "No tasks found."
MIN_COL_WIDTH = 18
SEP = " | "

_CHECK = {True: "[x]", False: "[ ]"}


def progress_bar(ratio: float, width: int = 20) -> str:
    ratio = min(1.0, max(0.0, ratio))
    filled = int(round(ratio * width))
    return "#" * filled + "-" * (width - filled)


def render_task_line(task: Task, palette: Palette = PLAIN) -> str:
    status = palette.paint(task.status.value, palette.for_status(task.status))
    task_id = palette.paint(task.id, palette.accent, BOLD)
    lines = [f"{_CHECK[task.is_done]} {task_id}  {task.title}  ({task.priority.value}, {status})"]
    if task.due_date:
        lines.append(f"      due: {task.due_date}")
    if task.notes:
        lines.append(f"      {palette.paint(task.notes, palette.muted)}")
    summary = subtask_summary(task)
    if summary:
        lines.append(f"      [{progress_bar(task.progress_percent / 100, 10)}] {summary}")
        for i, s in enumerate(task.subtasks, start=1):
            lines.append(f"        {i}. {_CHECK[s.done]} {s.text}")
    return "\n".join(lines)


def render_list(
    tasks: list[Task],
    search: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
    palette: Palette = PLAIN,
) -> str:
    shown = filter_tasks(tasks, search, status_filter)
    header = f"Tasks ({len(tasks)} total, filter={status_filter.value}"
    header += f", search={search!r})" if search else ")"
    if not shown:
        return f"{header}\n{palette.paint(EMPTY_LIST, palette.muted)}"
    return header + "\n" + "\n".join(render_task_line(t, palette) for t in shown)


def _row(cells: list[tuple[str, str]], col_width: int, palette: Palette) -> str:
    # Padding stays outside the color codes so widths match the plain text.
    return SEP.join(palette.paint(text, style) + " " * (col_width - len(text)) for text, style in cells).rstrip()


def render_board(tasks: list[Task], width: int | None = None, palette: Palette = PLAIN) -> str:
    columns = group_by_status(tasks)
    order = list(TaskStatus)
    if width is None:
        width = shutil.get_terminal_size((100, 30)).columns
    col_width = max(MIN_COL_WIDTH, (width - len(SEP) * (len(order) - 1)) // len(order))

    cells: dict[TaskStatus, list[tuple[str, str]]] = {}
    for status in order:
        acc: list[tuple[str, str]] = []
        for t in columns[status]:
            wrapped = textwrap.wrap(f"{t.id} {t.title} ({t.priority.value})", col_width) or [""]
            acc.extend((line, palette.for_status(status)) for line in wrapped)
        cells[status] = acc or [("(empty)", palette.muted)]

    header = _row(
        [(f"{CHART_LABELS[s].upper()} ({len(columns[s])})", palette.accent + BOLD) for s in order],
        col_width,
        palette,
    )
    rule = _row([("-" * col_width, palette.accent) for _ in order], col_width, palette)
    rows = max(len(c) for c in cells.values())
    body = [
        _row([cells[s][r] if r < len(cells[s]) else ("", "") for s in order], col_width, palette)
        for r in range(rows)
    ]
    return "\n".join([header, rule, *body])


def render_timer(
    time_left_seconds: int,
    initial_duration_seconds: int,
    running: bool,
    focused: Task | None,
    tasks: list[Task],
    palette: Palette = PLAIN,
) -> str:
    state = "running" if running else "idle"
    ratio = ring_progress(time_left_seconds, initial_duration_seconds)
    clock = palette.paint(format_clock(time_left_seconds), palette.accent, BOLD)
    lines = [
        f"{clock}  [{progress_bar(ratio)}]  {state}",
        f"Focus: {focused.title} ({focused.id})" if focused else "Focus: (none)",
    ]
    if focused is None:
        candidates = focus_candidates(tasks)
        if candidates:
            lines.append("Pick a task with /focus <id>:")
            lines.extend(f"  {t.id}  {t.title}" for t in candidates)
    return "\n".join(lines)


def render_stats(tasks: list[Task], bar_width: int = 30, palette: Palette = PLAIN) -> str:
    counts = count_by_status(tasks)
    labels, values = chart_series(counts)
    peak = max(values) if any(values) else 1
    label_width = max(len(label) for label in labels)
    lines = [f"Status counts ({len(tasks)} tasks)"]
    for status, label, value in zip(TaskStatus, labels, values):
        bar = "#" * int(round(value / peak * bar_width)) if value else ""
        bar = palette.paint(bar, palette.for_status(status))
        lines.append(f"{label.ljust(label_width)}  {str(value).rjust(3)} {bar}")
    return "\n".join(lines)
