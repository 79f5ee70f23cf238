"""Thread-safe cancellation primitive built on :class:`threading.Event`."""

from __future__ import annotations

import threading

__all__ = ["CancellationEvent"]


class CancellationEvent:
    """Lightweight wrapper around :class:`threading.Event` for cancellations."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        """Return ``True`` when cancellation has been requested."""

        return self._event.is_set()

    def set(self) -> None:
        """Signal cancellation."""

        self._event.set()

    def clear(self) -> None:
        """Reset the event so the owner can start another run."""

        self._event.clear()
