# src/taskmate/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.events import StoreChanged, TimerStarted, TimerStopped
from ..core.state import AppState

logger = logging.getLogger(__name__)

YES_ANSWERS = {"y", "yes"}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleIO:
    """
    Owns stdin.

    A single daemon thread reads lines. Normally each line is handed to the
    event loop (call_soon_threadsafe -> asyncio.Queue). While confirm() is
    waiting, the next line is routed to it instead, so there is never more
    than one reader and the prompt blocks the loop like a modal dialog.

    Also implements the UserPrompt port (notify / confirm).
    """

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._lines: asyncio.Queue[str | None] | None = None
        self._answers: queue.Queue[str | None] = queue.Queue()
        self._awaiting = threading.Event()
        self._thread: threading.Thread | None = None
        self._closed = False

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lines = asyncio.Queue()
        self._thread = threading.Thread(target=self._read_forever, name="console-stdin", daemon=True)
        self._thread.start()

    def _read_forever(self) -> None:
        while True:
            try:
                line: str | None = input()
            except (EOFError, KeyboardInterrupt):
                line = None
            except Exception:
                logger.exception("stdin reader crashed.")
                line = None

            if self._awaiting.is_set():
                self._answers.put(line)
            elif self._loop is not None and self._lines is not None:
                try:
                    self._loop.call_soon_threadsafe(self._lines.put_nowait, line)
                except RuntimeError:
                    # Loop already closed.
                    return

            if line is None:
                self._closed = True
                return

    async def next_line(self) -> str | None:
        if self._lines is None:
            raise RuntimeError("ConsoleIO.start() was not called")
        return await self._lines.get()

    # ---- UserPrompt ----

    def notify(self, message: str) -> None:
        print("\a", end="")
        _print_ts(f"[NOTICE] {message}")

    def confirm(self, question: str) -> bool:
        if self._closed:
            return False
        self._awaiting.set()
        try:
            print(f"[{_ts_local()}] {question} [y/N]: ", end="", flush=True)
            answer = self._answers.get()
        finally:
            self._awaiting.clear()
        return (answer or "").strip().lower() in YES_ANSWERS


async def run_console_loop(state: AppState, io: ConsoleIO) -> None:
    """Read commands until /exit or EOF. Runs on the event loop thread."""
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "TaskMate"))
    _print_ts(f"[{app_name}] {state.store.count()} tasks. Use /help for commands, /exit to quit.")

    changed = {"store": False}

    def _on_store_changed(_event: StoreChanged) -> None:
        changed["store"] = True

    def _on_timer_started(event: TimerStarted) -> None:
        _print_ts(f"[TIMER] running, {event.time_left_seconds // 60} min left.")

    def _on_timer_stopped(event: TimerStopped) -> None:
        _print_ts(f"[TIMER] idle, {event.time_left_seconds}s left.")

    unsubscribers = [
        state.dispatcher.subscribe(StoreChanged, _on_store_changed),
        state.dispatcher.subscribe(TimerStarted, _on_timer_started),
        state.dispatcher.subscribe(TimerStopped, _on_timer_stopped),
    ]

    def emit(text: str) -> None:
        _print_ts(text)

    try:
        while True:
            print("> ", end="", flush=True)
            user_input = await io.next_line()
            if user_input is None:
                logger.info("Console EOF received, exiting.")
                print()
                break

            user_input = user_input.strip()
            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                # Bare text is a shorthand for /add.
                user_input = "/add " + user_input

            try:
                reply = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply:
                print(reply, flush=True)

            if changed["store"]:
                changed["store"] = False
                print(f"({state.store.count()} tasks)", flush=True)
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()

    logger.info("Console connector finished.")
