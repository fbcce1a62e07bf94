"""Logging setup for launchpad."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from launchpad.ui.console import get_console

_HANDLER_NAME = "launchpad-rich"


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger("launchpad")
    root.setLevel(level)
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return
    handler = RichHandler(console=get_console(), show_path=False, rich_tracebacks=True, markup=False)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
