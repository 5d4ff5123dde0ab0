# src/taskmate/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

from ..core.state import AppState
from ..tasks.task_models import Priority, TaskStatus
from ..tasks.task_persistence import EXPORT_FILE_NAME, THEMES, export_tasks
from ..views.projections import StatusFilter
from . import render
from .theme import Palette, palette_for

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

FIELD_KEYS = ("priority", "due", "notes", "step")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_fields(args: list[str]) -> tuple[str, dict[str, Any]]:
    """
    Split args into a title and key=value fields.

    Known keys: priority, due, notes, step (repeatable). Everything else is title text.
    Raises ValueError for a priority outside low/medium/high.
    """
    title_parts: list[str] = []
    fields: dict[str, Any] = {"subtasks": []}
    for token in args:
        key, sep, value = token.partition("=")
        key = key.lower()
        if sep and key in FIELD_KEYS:
            if key == "step":
                if value.strip():
                    fields["subtasks"].append(value.strip())
            elif key == "priority":
                fields["priority"] = Priority.parse(value)
            elif key == "due":
                fields["due_date"] = value
            else:
                fields[key] = value
        else:
            title_parts.append(token)
    return " ".join(title_parts).strip(), fields


def _palette(state: AppState) -> Palette:
    return palette_for(state.theme)


def _lookup(state: AppState, raw_id: str) -> str | None:
    task_id = raw_id.rstrip(".")
    return task_id if task_id in state.store else None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title...> [priority=high] [due=2026-01-31] [notes="..."] [step="..."]..."""
    try:
        title, fields = parse_fields(args)
        task = state.store.create(title=title, **fields)
    except ValueError as e:
        return f"Cannot add task: {e}."
    return f"Added {task.id}: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> <title...> [fields]

    Replaces the task in place (same entry point as /add, with an existing id).
    Fields not given are taken from the current task; status resets to todo.
    """
    if not args:
        return "Usage: /edit <id> <title...> [priority=..] [due=..] [notes=..] [step=..]"
    task_id = _lookup(state, args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    current = state.store.find_by_id(task_id)
    if current is None:
        return f"Task {args[0]} not found."

    try:
        title, fields = parse_fields(args[1:])
    except ValueError as e:
        return f"Cannot edit task: {e}."
    fields.setdefault("priority", current.priority)
    fields.setdefault("due_date", current.due_date)
    fields.setdefault("notes", current.notes)
    if not fields["subtasks"]:
        fields["subtasks"] = current.subtasks
    try:
        task = state.store.create(id=task_id, title=title or current.title, **fields)
    except ValueError as e:
        return f"Cannot edit task: {e}."
    return f"Updated {task.id}: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = _lookup(state, args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    if state.rules.confirm_delete(task_id):
        return f"Task {task_id} removed."
    return "Kept."


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                      -> current filter
    /list active|completed|all -> change filter
    /list <filter> <search...> -> filter + title search
    /list clear                -> reset filter and search
    """
    if args:
        head = args[0].lower()
        if head == "clear":
            state.list_filter = StatusFilter.ALL
            state.list_search = ""
        elif head in {f.value for f in StatusFilter}:
            state.list_filter = StatusFilter(head)
            state.list_search = " ".join(args[1:])
        else:
            state.list_search = " ".join(args)
    return render.render_list(state.store.all(), state.list_search, state.list_filter, _palette(state))


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    task_id = _lookup(state, args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    state.rules.toggle_from_list(task_id)
    task = state.store.find_by_id(task_id)
    return f"Task {task_id} is now {task.status.value}." if task else f"Task {task_id} not found."


def cmd_mv(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /mv <id> <todo|doing|done>  (aliases: t, ip, d)"
    task_id = _lookup(state, args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    try:
        column = TaskStatus.parse(args[1])
    except ValueError:
        return f"Invalid column: {args[1]}."
    state.rules.drop_on_column(task_id, column)
    return render.render_board(state.store.all(), palette=_palette(state))


def cmd_board(state: AppState, args: list[str]) -> str:
    return render.render_board(state.store.all(), palette=_palette(state))


def cmd_step(state: AppState, args: list[str]) -> str:
    if len(args) != 2 or not args[1].isdigit():
        return "Usage: /step <id> <n>  (n starts at 1)"
    task_id = _lookup(state, args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    state.store.toggle_subtask(task_id, int(args[1]) - 1)
    task = state.store.find_by_id(task_id)
    return render.render_task_line(task, _palette(state)) if task else f"Task {task_id} not found."


def _timer_view(state: AppState) -> str:
    timer = state.timer
    view = render.render_timer(
        timer.time_left_seconds,
        timer.initial_duration_seconds,
        timer.running,
        timer.focused_task,
        state.store.all(),
        _palette(state),
    )
    presets = list(getattr(state.settings, "timer_presets", []) or [])
    if presets and not timer.running:
        view += "\nPresets: " + ", ".join(f"/timer {m}" for m in presets)
    return view


def cmd_timer(state: AppState, args: list[str]) -> str:
    """
    /timer                -> show timer
    /timer start          -> start (auto-focuses the first open task)
    /timer toggle         -> start/pause button
    /timer pause|stop     -> pause
    /timer reset          -> stop and rewind
    /timer <minutes>      -> preset (e.g. /timer 15)
    """
    timer = state.timer
    if not args:
        return _timer_view(state)

    sub = args[0].lower()
    if sub == "start":
        timer.start()
    elif sub == "toggle":
        timer.toggle()
    elif sub in ("pause", "stop"):
        timer.stop()
    elif sub == "reset":
        timer.reset()
    elif sub.isdigit():
        minutes = int(sub)
        if minutes <= 0:
            return "Preset must be a positive number of minutes."
        timer.set_preset(minutes)
    else:
        return "Usage: /timer [start|toggle|pause|reset|<minutes>]"
    return _timer_view(state)


def cmd_focus(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _timer_view(state)
    if not state.timer.focus_on(args[0].rstrip(".")):
        return f"Task {args[0]} not found."
    return _timer_view(state)


def cmd_unfocus(state: AppState, args: list[str]) -> str:
    if state.timer.running:
        return "Pause the timer before changing the focused task."
    state.timer.unfocus()
    return _timer_view(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render.render_stats(state.store.all(), palette=_palette(state))


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    target = Path(args[0]) if args else Path(getattr(state.settings, "export_dir", ".")) / EXPORT_FILE_NAME
    if emit is not None:
        emit(f"Writing {state.store.count()} tasks to {target}...")
    try:
        path = export_tasks(state.store.all(), target)
    except OSError as e:
        logger.exception("Export failed target=%s", target)
        return f"Export failed: {e}"
    return f"Exported {state.store.count()} tasks to {path}"


def cmd_theme(state: AppState, args: list[str]) -> str:
    """/theme toggles dark/light; /theme dark|light sets it."""
    if args:
        theme = args[0].lower()
        if theme not in THEMES:
            return "Usage: /theme [dark|light]"
    else:
        theme = "light" if state.theme == "dark" else "dark"
    state.persistence.save_theme(theme)
    state.theme = theme
    return f"Theme: {theme}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [priority=low|medium|high] [due=..] [notes=..] [step=..]."
)
registry.register("edit", cmd_edit, help_text="Edit a task in place: /edit <id> <title> [fields].")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["remove", "delete"])
registry.register("list", cmd_list, help_text="List tasks: /list [all|active|completed] [search].", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle done/todo: /done <id>.")
registry.register("mv", cmd_mv, help_text="Move a card to a column: /mv <id> <todo|doing|done>.", aliases=["move"])
registry.register("board", cmd_board, help_text="Show the kanban board.", aliases=["kanban"])
registry.register("step", cmd_step, help_text="Toggle a subtask: /step <id> <n>.")
registry.register("timer", cmd_timer, help_text="Focus timer: /timer [start|toggle|pause|reset|<minutes>].")
registry.register("focus", cmd_focus, help_text="Focus the timer on a task: /focus <id>.")
registry.register("unfocus", cmd_unfocus, help_text="Clear the focused task (timer must be idle).")
registry.register("stats", cmd_stats, help_text="Show status counts.", aliases=["analytics"])
registry.register("export", cmd_export, help_text="Export tasks as JSON: /export [path].")
registry.register("theme", cmd_theme, help_text="Toggle or set the color theme: /theme [dark|light].")
