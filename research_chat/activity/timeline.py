"""Live activity timeline for the turn in progress."""

from __future__ import annotations

from collections.abc import Iterator

from ..model import DisplayEntry


class ActivityTimeline:
    """Append-only list of display entries, cleared once per turn."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[DisplayEntry] = []

    def append(self, entry: DisplayEntry) -> None:
        self._entries.append(entry)

    def reset(self) -> None:
        """Drop every entry; called when a new turn is submitted."""
        self._entries = []

    def snapshot(self) -> tuple[DisplayEntry, ...]:
        """Return a copy of the entries that later appends cannot change."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DisplayEntry]:
        return iter(tuple(self._entries))


__all__ = ["ActivityTimeline"]
