# src/taskmate/tasks/task_persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.ports import KeyValueStore
from .task_models import Priority, Subtask, Task, TaskStatus

logger = logging.getLogger(__name__)

TASKS_KEY = "taskmate_data"
THEME_KEY = "taskmate_theme"
EXPORT_FILE_NAME = "mytasks.json"

THEMES = ("dark", "light")
DEFAULT_THEME = "dark"


def task_to_dict(task: Task) -> dict[str, Any]:
    """JSON shape of a task (camelCase keys, as exported by the browser version)."""
    return {
        "id": task.id,
        "title": task.title,
        "priority": task.priority.value,
        "notes": task.notes,
        "dueDate": task.due_date,
        "status": task.status.value,
        "subtasks": [{"text": s.text, "done": s.done} for s in task.subtasks],
        "createdAt": task.created_at,
    }


def task_from_dict(raw: dict[str, Any]) -> Task | None:
    """
    Build a Task from stored JSON.

    Returns None for entries that cannot form a task (no id or no title).
    Unknown status/priority values are coerced so that every loaded task
    satisfies the status invariant.
    """
    tid = raw.get("id")
    title = raw.get("title")
    if tid is None or not str(tid).strip():
        return None
    if not isinstance(title, str) or not title.strip():
        return None

    subtasks: list[Subtask] = []
    raw_subtasks = raw.get("subtasks")
    if isinstance(raw_subtasks, list):
        for item in raw_subtasks:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if not isinstance(text, str) or not text:
                continue
            subtasks.append(Subtask(text=text, done=bool(item.get("done", False))))

    due = raw.get("dueDate")
    return Task(
        id=str(tid),
        title=title,
        created_at=str(raw.get("createdAt") or ""),
        priority=Priority.from_raw(raw.get("priority")),
        notes=str(raw.get("notes") or ""),
        due_date=str(due) if due else None,
        status=TaskStatus.from_raw(raw.get("status")),
        subtasks=subtasks,
    )


def dump_tasks(tasks: Iterable[Task], *, indent: int | None = None) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False, indent=indent)


class TaskPersistence:
    """
    Persistence adapter: the whole task collection under one fixed key.

    load() never raises on bad data: absent or corrupt storage yields [].
    save() propagates storage errors, a mutation is not complete without it.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = TASKS_KEY, theme_key: str = THEME_KEY) -> None:
        self._kv = kv
        self._key = key
        self._theme_key = theme_key

    def load(self) -> list[Task]:
        try:
            raw = self._kv.get_item(self._key)
        except Exception:
            logger.exception("Failed to read %s from storage; starting empty.", self._key)
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored %s is not valid JSON; starting empty.", self._key)
            return []

        if not isinstance(data, list):
            logger.warning("Stored %s is not a list (got %s); starting empty.", self._key, type(data).__name__)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for entry in data:
            task = task_from_dict(entry) if isinstance(entry, dict) else None
            if task is None:
                logger.warning("Skipping malformed task entry: %r", entry)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            out.append(task)

        logger.info("Loaded %d tasks from %s", len(out), self._key)
        return out

    def save(self, tasks: Iterable[Task]) -> None:
        payload = dump_tasks(tasks)
        self._kv.set_item(self._key, payload)

    # ---- theme preference ----

    def load_theme(self) -> str:
        try:
            raw = self._kv.get_item(self._theme_key)
        except Exception:
            logger.exception("Failed to read theme preference.")
            return DEFAULT_THEME
        return raw if raw in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme: {theme!r}")
        self._kv.set_item(self._theme_key, theme)


def export_tasks(tasks: Iterable[Task], path: str | Path) -> Path:
    """
    Write a read-only JSON snapshot of the collection to `path`.

    If `path` is a directory, the file is named mytasks.json inside it.
    """
    path = Path(path).expanduser()
    if path.is_dir():
        path = path / EXPORT_FILE_NAME
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = path.with_suffix(".tmp")
    tmp.write_text(dump_tasks(tasks, indent=2), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(OSError):
        os.chmod(path, 0o600)
    logger.info("Exported tasks to %s", path)
    return path
