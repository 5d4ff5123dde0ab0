# src/taskmate/cli/theme.py

"""
Terminal palettes for the dark and light themes.

Colors are ANSI escapes built from hex values: truecolor when COLORTERM
advertises it, otherwise the nearest xterm-256 cube entry. Output stays
plain when stdout is not a TTY (unless FORCE_COLOR=1) or when NO_COLOR is set.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..tasks.task_models import TaskStatus
from ..tasks.task_persistence import DEFAULT_THEME

RESET = "\033[0m"
BOLD = "\033[1m"

_HEX: dict[str, dict[str, str]] = {
    # Bright tones for dark terminal backgrounds.
    "dark": {
        "accent": "#476EAE",
        "todo": "#48B3AF",
        "doing": "#F6FF99",
        "done": "#A7E399",
        "muted": "#8A8F98",
    },
    # Deeper tones that stay readable on white.
    "light": {
        "accent": "#1F3F7A",
        "todo": "#1B6F6C",
        "doing": "#8A6D00",
        "done": "#2E7D32",
        "muted": "#5F6368",
    },
}


def colors_enabled() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    force = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
    return force or sys.stdout.isatty()


def _truecolor() -> bool:
    colorterm = os.environ.get("COLORTERM", "").lower()
    return any(tok in colorterm for tok in ("truecolor", "24bit"))


def fg(hex_code: str, *, truecolor: bool) -> str:
    h = hex_code.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    if truecolor:
        return f"\033[38;2;{r};{g};{b}m"
    r6, g6, b6 = (int(round(x / 255 * 5)) for x in (r, g, b))
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"


@dataclass(frozen=True, slots=True)
class Palette:
    name: str
    enabled: bool = False
    accent: str = ""
    todo: str = ""
    doing: str = ""
    done: str = ""
    muted: str = ""

    def paint(self, text: str, *styles: str) -> str:
        prefix = "".join(styles)
        if not self.enabled or not text or not prefix:
            return text
        return f"{prefix}{text}{RESET}"

    def for_status(self, status: TaskStatus) -> str:
        if status == TaskStatus.DOING:
            return self.doing
        if status == TaskStatus.DONE:
            return self.done
        return self.todo


PLAIN = Palette(name="plain")


def palette_for(theme: str, *, enabled: bool | None = None) -> Palette:
    """Palette for a stored theme name; unknown names fall back to dark."""
    name = theme if theme in _HEX else DEFAULT_THEME
    if enabled is None:
        enabled = colors_enabled()
    if not enabled:
        return Palette(name=name)
    truecolor = _truecolor()
    codes = {role: fg(hex_code, truecolor=truecolor) for role, hex_code in _HEX[name].items()}
    return Palette(name=name, enabled=True, **codes)
