# src/taskmate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, prompting and timing swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol


class KeyValueStore(Protocol):
    """Durable string store addressed by fixed keys (localStorage-like)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class UserPrompt(Protocol):
    """
    User-facing capability injected into the core.

    notify() delivers a message (native notification, console line, ...).
    confirm() asks a yes/no question and blocks until the user answers.
    """

    def notify(self, message: str) -> None: ...
    def confirm(self, question: str) -> bool: ...


class RepeatingHandle(Protocol):
    """
    Handle of a scheduled repeating callback.

    After cancel() returns, the callback is never invoked again.
    """

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> RepeatingHandle: ...
