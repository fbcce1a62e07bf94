"""Read ``.env`` files into the process environment before settings load."""

from __future__ import annotations

import os
from pathlib import Path
from typing import MutableMapping

_QUOTES = {"'", '"'}


def parse_dotenv(text: str) -> dict[str, str]:
    """Return ``KEY=value`` assignments; later lines win.

    Accepts an optional ``export`` prefix and single or double quotes.
    Unquoted values end at `` #``. Empty values are dropped.
    """
    values: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = _unquote(value.strip())
        if value:
            values[key] = value
    return values


def load_dotenv(path: str | os.PathLike[str] = ".env", environ: MutableMapping[str, str] | None = None) -> bool:
    """Apply ``path`` to ``environ`` without overriding set variables.

    Returns whether the file was read.
    """
    target = os.environ if environ is None else environ
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError:
        return False
    for key, value in parse_dotenv(text).items():
        target.setdefault(key, value)
    return True


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    comment = value.find(" #")
    if comment != -1:
        value = value[:comment].rstrip()
    return value
