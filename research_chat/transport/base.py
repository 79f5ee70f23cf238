"""Contract between the chat session and a streaming agent transport."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from ..model import Message, SubmitPayload
from ..util.signals import Signal


class TransportError(RuntimeError):
    """Raised when the transport cannot reach or read from the agent server."""


@dataclass(slots=True)
class TransportSignals:
    """Observable hooks every transport exposes.

    ``update_received`` fires once per streamed node update, in arrival order,
    with the raw update mapping.  ``thread_changed`` fires with no arguments
    whenever ``messages`` or ``is_loading`` changed.  ``finished`` receives the
    final state values when a run completes without being stopped.
    """

    update_received: Signal = field(default_factory=Signal)
    thread_changed: Signal = field(default_factory=Signal)
    finished: Signal = field(default_factory=Signal)


class StreamTransport(Protocol):
    """Protocol implemented by transports driving the research agent."""

    signals: TransportSignals

    @property
    def messages(self) -> Sequence[Message]:  # pragma: no cover - protocol
        """Return the conversation as last reported by the server."""

    @property
    def is_loading(self) -> bool:  # pragma: no cover - protocol
        """Return ``True`` while a run is streaming."""

    def submit(self, payload: SubmitPayload) -> None:  # pragma: no cover - protocol
        """Start a run with *payload* as its input."""

    def stop(self) -> None:  # pragma: no cover - protocol
        """Abort the active run, if any."""


__all__ = ["StreamTransport", "TransportError", "TransportSignals"]
