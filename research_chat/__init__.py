"""Client-side activity tracking for a streaming research agent."""

__version__ = "0.1.0"
