"""Data structures shared by the classifier, the session and the transport."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DisplayEntry:
    """One human-readable line of the activity timeline."""

    title: str
    data: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "data": self.data}


@dataclass(frozen=True, slots=True)
class Message:
    """Conversation message as exchanged with the agent server."""

    id: str
    type: str
    content: str = ""

    @property
    def is_ai(self) -> bool:
        return self.type == "ai"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "type": self.type, "content": self.content}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Message:
        """Build a message from a server payload.

        Content may arrive as a list of typed parts; text parts are joined.
        """
        raw_id = payload.get("id")
        return cls(
            id="" if raw_id is None else str(raw_id),
            type=str(payload.get("type") or ""),
            content=_content_text(payload.get("content")),
        )


def _content_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, Sequence):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, Mapping) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content)


@dataclass(frozen=True, slots=True)
class SubmitPayload:
    """Input handed to the transport when a turn starts."""

    messages: tuple[Message, ...]
    initial_search_query_count: int
    max_research_loops: int
    reasoning_model: str

    def to_dict(self, *, messages_key: str = "messages") -> dict[str, Any]:
        return {
            messages_key: [message.to_dict() for message in self.messages],
            "initial_search_query_count": self.initial_search_query_count,
            "max_research_loops": self.max_research_loops,
            "reasoning_model": self.reasoning_model,
        }


__all__ = ["DisplayEntry", "Message", "SubmitPayload"]
