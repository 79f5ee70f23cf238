"""Glue between user actions, the chat session and the agent transport."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..agent.effort import EffortLevel, derive_research_budget
from ..model import Message, SubmitPayload
from ..telemetry import log_event
from ..transport.base import StreamTransport
from ..util.time import timestamp_message_id
from .session import ResearchChatSession


class ResearchChatCoordinator:
    """Start turns, wire transport callbacks and handle cancellation."""

    def __init__(
        self,
        *,
        session: ResearchChatSession,
        transport: StreamTransport,
        id_factory: Callable[[], str] = timestamp_message_id,
    ) -> None:
        self._session = session
        self._transport = transport
        self._id_factory = id_factory
        transport.signals.update_received.connect(self._on_update)
        transport.signals.thread_changed.connect(self._on_thread_changed)
        transport.signals.finished.connect(self._on_finished)

    # ------------------------------------------------------------------
    @property
    def session(self) -> ResearchChatSession:
        return self._session

    # ------------------------------------------------------------------
    @property
    def transport(self) -> StreamTransport:
        return self._transport

    # ------------------------------------------------------------------
    def submit(self, text: str, effort: EffortLevel | str, model: str) -> bool:
        """Send *text* to the agent as a new turn.

        Whitespace-only input is ignored and ``False`` is returned.  The caller
        must not submit again while the transport is loading.
        """
        if not text.strip():
            return False

        self._session.begin_turn()
        budget = derive_research_budget(effort)
        message = Message(id=self._id_factory(), type="human", content=text)
        payload = SubmitPayload(
            messages=(*self._transport.messages, message),
            initial_search_query_count=budget.initial_search_query_count,
            max_research_loops=budget.max_research_loops,
            reasoning_model=model,
        )
        log_event(
            "TURN_SUBMITTED",
            {
                "message_id": message.id,
                "effort": str(effort),
                "reasoning_model": model,
                "initial_search_query_count": budget.initial_search_query_count,
                "max_research_loops": budget.max_research_loops,
                "history_length": len(payload.messages) - 1,
            },
        )
        self._transport.submit(payload)
        return True

    # ------------------------------------------------------------------
    def cancel(self) -> None:
        """Abort the active run and discard every piece of session state."""
        self._transport.stop()
        self._session.reset()
        log_event("TURN_CANCELLED")

    # ------------------------------------------------------------------
    def _on_update(self, raw: object) -> None:
        self._session.handle_update_event(raw)

    # ------------------------------------------------------------------
    def _on_thread_changed(self) -> None:
        self._session.on_thread_changed(
            self._transport.messages, self._transport.is_loading
        )

    # ------------------------------------------------------------------
    def _on_finished(self, values: Mapping[str, Any] | None) -> None:
        log_event("RUN_FINISHED", {"values": values}, level=logging.DEBUG)


__all__ = ["ResearchChatCoordinator"]
