# src/taskmate/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskmate.log"
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3

# Per-second or per-call chatter: console only shows these at WARNING+.
QUIET_PREFIXES = ("taskmate.timer.", "taskmate.storage.")


class ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable.

    Records from our own package pass (except QUIET_PREFIXES below WARNING);
    everything else, captured py.warnings included, needs ERROR+.
    """

    def __init__(self, package: str = "taskmate", quiet: tuple[str, ...] = QUIET_PREFIXES) -> None:
        super().__init__()
        self._own = package + "."
        self._quiet = quiet

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(self._own):
            return record.levelno >= logging.ERROR
        if record.name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def level_from_name(name: str | None, default: int = logging.WARNING) -> int:
    """'debug' / 'INFO' / '20' -> logging level; anything else -> default."""
    raw = (name or "").strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmate",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a rotating file handler on the root logger.

    The console shares the terminal with the prompt, so its format is short;
    the file keeps everything with timestamps. Call once, before the first log
    line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
