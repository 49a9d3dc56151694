"""
StepRegistry: the ordered, append-only list of entries a pipeline runs.

Entries are tagged STEP, FAIL or FAILFAST.  Order is registration order and
is never changed; the engine only ever scans forward from a cursor.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Collection, Iterator
from dataclasses import dataclass
from typing import Any

from riel.core.constants import StepKind

StepCallback = Callable[..., Any | Awaitable[Any]]


def callback_name(callback: Callable[..., Any]) -> str:
    """Best-effort display name for a callback, used in logs."""
    name = getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None)
    if name is None:
        name = type(callback).__name__
    return name


@dataclass(frozen=True)
class StepEntry:
    """One registered callback and its kind."""

    callback: StepCallback
    kind: StepKind
    name: str

    @classmethod
    def create(cls, callback: StepCallback, kind: StepKind, name: str | None = None) -> StepEntry:
        return cls(callback=callback, kind=kind, name=name or callback_name(callback))


class StepRegistry:
    """Ordered entries owned by exactly one pipeline."""

    def __init__(self) -> None:
        self._entries: list[StepEntry] = []

    def append(self, entry: StepEntry) -> None:
        self._entries.append(entry)

    def next_index(self, start: int, kinds: Collection[StepKind]) -> int | None:
        """
        Return the smallest index ``>= start`` whose entry kind is in ``kinds``.

        Returns None when no such entry exists.
        """
        for index in range(max(start, 0), len(self._entries)):
            if self._entries[index].kind in kinds:
                return index
        return None

    def entries(self) -> tuple[StepEntry, ...]:
        return tuple(self._entries)

    def __getitem__(self, index: int) -> StepEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[StepEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        kinds = ", ".join(f"{e.kind}:{e.name}" for e in self._entries)
        return f"StepRegistry([{kinds}])"
