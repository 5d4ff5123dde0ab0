# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmate.cli.bootstrap import create_initial_state
from taskmate.core.events import EventDispatcher
from taskmate.core.state import AppState
from taskmate.storage.kv_store import SqliteKeyValueStore
from taskmate.tasks.task_persistence import TaskPersistence
from taskmate.tasks.task_store import TaskStore

from .fakes import FakePrompt, InMemoryKV, ManualTickScheduler


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Rendered text in tests never carries color codes."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskMate",
        data_dir=tmp_path,
        db_path=tmp_path / "taskmate.sqlite3",
        log_dir=tmp_path,
        export_dir=tmp_path,
        default_focus_minutes=25,
        timer_presets=[15, 25, 45],
        tick_interval_seconds=1.0,
        confirm_delete=True,
    )


@pytest.fixture()
def kv() -> InMemoryKV:
    return InMemoryKV()


@pytest.fixture()
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture()
def store(kv: InMemoryKV, dispatcher: EventDispatcher) -> TaskStore:
    return TaskStore(TaskPersistence(kv), dispatcher)


@pytest.fixture()
def prompt() -> FakePrompt:
    return FakePrompt()


@pytest.fixture()
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture()
def state(settings: SimpleNamespace, prompt: FakePrompt, scheduler: ManualTickScheduler) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: We keep the real SQLite key-value store here because the
    persist-on-every-mutation contract is part of what we want to test.
    """
    return create_initial_state(
        settings=settings,
        prompt=prompt,
        kv=SqliteKeyValueStore(settings.db_path),
        scheduler=scheduler,
    )
