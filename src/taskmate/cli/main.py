# src/taskmate/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console connector on an
asyncio loop. The loop thread is the only thread that mutates tasks or the
timer; stdin is read by a helper thread that just hands lines over.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleIO, run_console_loop
from ..core.state import AppState
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState, io: ConsoleIO) -> None:
    loop = asyncio.get_running_loop()
    io.start(loop)

    console = asyncio.create_task(run_console_loop(state, io))

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        console.cancel()

    for signum in (signal.SIGINT, signal.SIGTERM):
        # Some platforms (Windows) do not support loop signal handlers.
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signum, _handle_signal, signum)

    try:
        await console
    except asyncio.CancelledError:
        pass
    finally:
        # Page teardown: cancel the tick before the loop goes away.
        state.timer.shutdown()


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.log_dir, console_level=level_from_name(settings.log_level))

    logger.info("Starting %s... log_file=%s", settings.app_name, log_file)

    io = ConsoleIO()
    state = create_initial_state(settings=settings, prompt=io)

    try:
        asyncio.run(_run(state, io))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, exiting.")
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
