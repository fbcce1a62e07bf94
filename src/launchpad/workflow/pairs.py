"""Ordered key/value pair lists for runtime config and build arguments."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Iterable, Iterator

_ENTRY_IDS = count(1)


@dataclass
class KeyValuePair:
    key: str = ""
    value: str = ""
    entry_id: int = 0


class PairList:
    """Ordered sequence of pairs addressed by position.

    Entries change only through ``append``/``remove_at`` and the per-entry
    setters; there is no item assignment or deletion. ``entry_id`` is stable
    for the lifetime of an entry so UI bindings can be re-keyed after a
    removal shifts positions.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._entries: list[KeyValuePair] = []
        for key, value in pairs:
            self.append(key, value)

    def append(self, key: str = "", value: str = "") -> KeyValuePair:
        entry = KeyValuePair(key=key, value=value, entry_id=next(_ENTRY_IDS))
        self._entries.append(entry)
        return entry

    def remove_at(self, index: int) -> KeyValuePair:
        self._check_index(index)
        return self._entries.pop(index)

    def set_key(self, index: int, key: str) -> None:
        self._check_index(index)
        self._entries[index].key = key

    def set_value(self, index: int, value: str) -> None:
        self._check_index(index)
        self._entries[index].value = value

    def index_of(self, entry_id: int) -> int:
        for index, entry in enumerate(self._entries):
            if entry.entry_id == entry_id:
                return index
        raise KeyError(entry_id)

    def items(self) -> list[tuple[str, str]]:
        return [(entry.key, entry.value) for entry in self._entries]

    def to_list(self) -> list[dict[str, str]]:
        return [{"key": entry.key, "value": entry.value} for entry in self._entries]

    def __getitem__(self, index: int) -> KeyValuePair:
        return self._entries[index]

    def __iter__(self) -> Iterator[KeyValuePair]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PairList({self.items()!r})"

    def _check_index(self, index: int) -> None:
        # Negative positions are rejected: entries are addressed from the front.
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"pair index out of range: {index}")


def collapse_pairs(pairs: Iterable[KeyValuePair]) -> dict[str, str]:
    """Fold pairs into a mapping of trimmed keys; later entries win."""
    collapsed: dict[str, str] = {}
    for entry in pairs:
        collapsed[entry.key.strip()] = entry.value.strip()
    return collapsed


def duplicate_keys(pairs: Iterable[KeyValuePair]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for entry in pairs:
        key = entry.key.strip()
        if not key:
            continue
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates
