"""State management for one research chat conversation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..agent.events import ClassificationResult, classify_event
from ..model import DisplayEntry, Message
from ..util.signals import Signal
from .history import ActivityHistory, FinalizeState, HistoryArchiver
from .timeline import ActivityTimeline


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResearchChatSessionEvents:
    """Expose observable hooks for the session lifecycle."""

    entry_added: Signal
    timeline_reset: Signal
    history_changed: Signal


class ResearchChatSession:
    """Own the live timeline, the finalize latch and the archived history.

    Every mutation goes through this class; the transport only feeds it raw
    updates and thread changes.
    """

    def __init__(self, *, archiver: HistoryArchiver | None = None) -> None:
        self._timeline = ActivityTimeline()
        self._state = FinalizeState.ACTIVE
        self._history = ActivityHistory()
        self._archiver = archiver or HistoryArchiver()
        self.events = ResearchChatSessionEvents(
            entry_added=Signal(),
            timeline_reset=Signal(),
            history_changed=Signal(),
        )

    # ------------------------------------------------------------------
    @property
    def timeline(self) -> tuple[DisplayEntry, ...]:
        return self._timeline.snapshot()

    # ------------------------------------------------------------------
    @property
    def history(self) -> ActivityHistory:
        return self._history

    # ------------------------------------------------------------------
    @property
    def finalize_state(self) -> FinalizeState:
        return self._state

    # ------------------------------------------------------------------
    def begin_turn(self) -> None:
        """Clear per-turn state before a new submission."""
        self._timeline.reset()
        self._state = FinalizeState.ACTIVE
        self.events.timeline_reset.emit()

    # ------------------------------------------------------------------
    def handle_update_event(self, raw: Mapping[str, Any] | Any) -> ClassificationResult:
        """Classify a streamed update and record its entry."""
        result = classify_event(raw)
        if result.entry is not None:
            self._timeline.append(result.entry)
            self.events.entry_added.emit(result.entry)
        if result.finalizes:
            self._state = FinalizeState.LATCHED
        return result

    # ------------------------------------------------------------------
    def on_thread_changed(
        self, messages: Sequence[Message], is_loading: bool
    ) -> str | None:
        """Re-evaluate archival after the message list or loading flag changed.

        Returns the identifier of the message the timeline was archived under,
        or ``None`` when nothing was archived.
        """
        decision = self._archiver.evaluate(
            state=self._state,
            timeline=self._timeline.snapshot(),
            messages=messages,
            is_loading=is_loading,
            history=self._history,
        )
        self._state = decision.state
        if decision.archived_id is not None:
            self._history = decision.history
            self.events.history_changed.emit(self._history)
        return decision.archived_id

    # ------------------------------------------------------------------
    def activity_for(self, message_id: str) -> tuple[DisplayEntry, ...]:
        """Return archived activity for *message_id* (empty when unknown)."""
        return self._history.get(message_id, ())

    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Discard the timeline, the history and the latch."""
        logger.debug("Resetting research chat session state")
        self._timeline.reset()
        self._state = FinalizeState.ACTIVE
        self._history = ActivityHistory()
        self.events.timeline_reset.emit()
        self.events.history_changed.emit(self._history)


__all__ = ["ResearchChatSession", "ResearchChatSessionEvents"]
