import pytest

from research_chat.activity import render_timeline_markdown, render_timeline_plain
from research_chat.activity.render import render_entry_plain
from research_chat.model import DisplayEntry

pytestmark = pytest.mark.unit

ENTRIES = (
    DisplayEntry("Generating Search Queries", "aurora, solar wind"),
    DisplayEntry("Finalizing Answer", "Composing and presenting the final answer."),
)


def test_plain_timeline_numbers_entries():
    assert render_timeline_plain(ENTRIES) == (
        "1. Generating Search Queries: aurora, solar wind\n"
        "2. Finalizing Answer: Composing and presenting the final answer."
    )


def test_plain_entry_without_data_shows_title_only():
    assert render_entry_plain(DisplayEntry("Generating Search Queries", "")) == (
        "Generating Search Queries"
    )


def test_markdown_timeline_uses_heading():
    text = render_timeline_markdown(ENTRIES[:1], heading="Activity")

    assert text.splitlines() == [
        "**Activity**",
        "",
        "- **Generating Search Queries**: aurora, solar wind",
    ]


def test_empty_timeline_renders_nothing():
    assert render_timeline_plain(()) == ""
    assert render_timeline_markdown(()) == ""
