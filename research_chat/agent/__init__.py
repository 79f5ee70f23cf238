"""Agent-facing helpers: event classification and research budgets."""

from .effort import EffortLevel, ResearchBudget, derive_research_budget
from .events import ClassificationResult, classify_event, parse_update_event

__all__ = [
    "ClassificationResult",
    "EffortLevel",
    "ResearchBudget",
    "classify_event",
    "derive_research_budget",
    "parse_update_event",
]
