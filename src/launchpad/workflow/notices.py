"""Transient user-facing notices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None:
        ...


def success(message: str) -> Notice:
    return Notice("success", message)


def error(message: str) -> Notice:
    return Notice("error", message)


def warning(message: str) -> Notice:
    return Notice("warning", message)
