"""Shared helpers used across research_chat."""
