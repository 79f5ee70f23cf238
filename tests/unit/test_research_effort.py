import logging

import pytest

from research_chat.agent.effort import EffortLevel, ResearchBudget, derive_research_budget

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("effort", "expected"),
    [
        ("low", (1, 1)),
        ("medium", (3, 3)),
        ("high", (5, 10)),
        (EffortLevel.HIGH, (5, 10)),
    ],
)
def test_known_effort_levels(effort, expected):
    assert derive_research_budget(effort).as_tuple() == expected


def test_unknown_effort_yields_zero_budget(caplog):
    with caplog.at_level(logging.WARNING, logger="research_chat"):
        budget = derive_research_budget("extreme")

    assert budget == ResearchBudget(0, 0)
    assert "extreme" in caplog.text


def test_effort_is_case_sensitive():
    assert derive_research_budget("LOW").as_tuple() == (0, 0)
