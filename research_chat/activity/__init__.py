"""Live and archived research activity for a chat conversation."""

from .coordinator import ResearchChatCoordinator
from .history import ActivityHistory, ArchiveDecision, FinalizeState, HistoryArchiver
from .render import render_timeline_markdown, render_timeline_plain
from .session import ResearchChatSession, ResearchChatSessionEvents
from .timeline import ActivityTimeline

__all__ = [
    "ActivityHistory",
    "ActivityTimeline",
    "ArchiveDecision",
    "FinalizeState",
    "HistoryArchiver",
    "ResearchChatCoordinator",
    "ResearchChatSession",
    "ResearchChatSessionEvents",
    "render_timeline_markdown",
    "render_timeline_plain",
]
