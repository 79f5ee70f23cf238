"""Map coarse effort levels onto research generation budgets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum


logger = logging.getLogger(__name__)


class EffortLevel(StrEnum):
    """User-selectable research effort."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class ResearchBudget:
    """Query and loop limits sent to the agent with every turn."""

    initial_search_query_count: int = 0
    max_research_loops: int = 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.initial_search_query_count, self.max_research_loops)


_BUDGETS: dict[EffortLevel, ResearchBudget] = {
    EffortLevel.LOW: ResearchBudget(1, 1),
    EffortLevel.MEDIUM: ResearchBudget(3, 3),
    EffortLevel.HIGH: ResearchBudget(5, 10),
}


def derive_research_budget(effort: EffortLevel | str) -> ResearchBudget:
    """Return the budget for *effort*.

    Unknown levels are accepted and yield a zero budget; the agent then runs
    with no initial queries and no research loops.
    """
    try:
        level = EffortLevel(effort)
    except ValueError:
        logger.warning("Unknown research effort %r; using zero budgets", effort)
        return ResearchBudget()
    return _BUDGETS[level]


__all__ = ["EffortLevel", "ResearchBudget", "derive_research_budget"]
