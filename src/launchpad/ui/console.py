"""Shared themed console for launchpad output."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "accent": "gold1",
        "subtitle": "dim",
        "step": "bold gold1",
        "step.inactive": "dim",
        "info": "dim",
        "warning": "dark_orange",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "border": "grey50",
    }
)

_CONSOLE = Console(theme=THEME, highlight=False)


def get_console() -> Console:
    return _CONSOLE
