"""Streaming transports feeding agent updates into a chat session."""

from .base import StreamTransport, TransportError, TransportSignals
from .langgraph import LangGraphStreamTransport

__all__ = [
    "LangGraphStreamTransport",
    "StreamTransport",
    "TransportError",
    "TransportSignals",
]
