"""Per-message activity history and the archival state machine."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from ..model import DisplayEntry, Message
from ..telemetry import log_event


logger = logging.getLogger(__name__)


class FinalizeState(Enum):
    """Whether the terminal event of the current turn has been observed."""

    ACTIVE = "active"
    LATCHED = "latched"


class ActivityHistory(Mapping[str, tuple[DisplayEntry, ...]]):
    """Immutable mapping of AI message id to the timeline that produced it.

    :meth:`with_entries` returns a new history; existing instances never
    change, so a history handed to a renderer stays a stable snapshot.
    """

    __slots__ = ("_data",)

    def __init__(
        self,
        items: Mapping[str, Iterable[DisplayEntry]] | None = None,
    ) -> None:
        data = {
            str(message_id): tuple(entries)
            for message_id, entries in (items or {}).items()
        }
        self._data: Mapping[str, tuple[DisplayEntry, ...]] = MappingProxyType(data)

    def with_entries(
        self, message_id: str, entries: Iterable[DisplayEntry]
    ) -> ActivityHistory:
        """Return a copy of the history with *entries* stored under *message_id*.

        An existing key is overwritten.
        """
        updated = dict(self._data)
        updated[message_id] = tuple(entries)
        return ActivityHistory(updated)

    def __getitem__(self, message_id: str) -> tuple[DisplayEntry, ...]:
        return self._data[message_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ActivityHistory({dict(self._data)!r})"


@dataclass(frozen=True, slots=True)
class ArchiveDecision:
    """Result of evaluating the archiver after a thread change."""

    state: FinalizeState
    history: ActivityHistory
    archived_id: str | None = None


class HistoryArchiver:
    """Commit the finished turn's timeline to history exactly once.

    The archiver is evaluated whenever the transport's message list or loading
    flag changes.  It only acts while the finalize state is latched and the
    stream has stopped loading with at least one message available.  The latch
    is then released; the timeline is stored when the last message is an AI
    reply with an identifier, otherwise the turn's activity is dropped.
    """

    def evaluate(
        self,
        *,
        state: FinalizeState,
        timeline: Sequence[DisplayEntry],
        messages: Sequence[Message],
        is_loading: bool,
        history: ActivityHistory,
    ) -> ArchiveDecision:
        if state is not FinalizeState.LATCHED or is_loading or not messages:
            return ArchiveDecision(state=state, history=history)

        last_message = messages[-1]
        if not (last_message.is_ai and last_message.id):
            logger.info(
                "Turn finished without an identifiable AI reply; activity not archived"
            )
            return ArchiveDecision(state=FinalizeState.ACTIVE, history=history)

        snapshot = tuple(timeline)
        updated = history.with_entries(last_message.id, snapshot)
        log_event(
            "ACTIVITY_ARCHIVED",
            {
                "message_id": last_message.id,
                "entry_count": len(snapshot),
                "entries": snapshot,
            },
        )
        return ArchiveDecision(
            state=FinalizeState.ACTIVE,
            history=updated,
            archived_id=last_message.id,
        )


__all__ = ["ActivityHistory", "ArchiveDecision", "FinalizeState", "HistoryArchiver"]
