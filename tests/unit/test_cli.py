"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest

import research_chat.cli.main as cli_main
from research_chat.cli import commands
from research_chat.model import Message
from research_chat.transport import TransportError

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def agent(monkeypatch, fake_transport):
    monkeypatch.setattr(commands, "build_transport", lambda args: fake_transport)
    return fake_transport


def _answering(transport, payload):
    transport.emit_update({"generate_query": {"query_list": ["aurora", "solar wind"]}})
    transport.emit_update({"finalize_answer": {}})
    answer = Message(id="ai-1", type="ai", content="Auroras come from solar wind.\n")
    transport.set_thread(messages=(*payload.messages, answer), is_loading=False)


def test_budget_prints_json(capsys):
    assert cli_main.main(["budget", "high"]) == 0

    assert json.loads(capsys.readouterr().out) == {
        "effort": "high",
        "initial_search_query_count": 5,
        "max_research_loops": 10,
    }


def test_budget_unknown_effort_is_zero(capsys):
    cli_main.main(["budget", "extreme"])

    data = json.loads(capsys.readouterr().out)
    assert (data["initial_search_query_count"], data["max_research_loops"]) == (0, 0)


def test_ask_prints_activity_and_answer(agent, capsys):
    agent.on_submit = _answering

    code = cli_main.main(["ask", "What causes auroras?", "--effort", "low", "--show-activity"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.splitlines() == [
        "1. Generating Search Queries: aurora, solar wind",
        "2. Finalizing Answer: Composing and presenting the final answer.",
        "",
        "Auroras come from solar wind.",
        "",
        "Research activity:",
        "1. Generating Search Queries: aurora, solar wind",
        "2. Finalizing Answer: Composing and presenting the final answer.",
    ]
    payload = agent.submitted[0]
    assert (payload.initial_search_query_count, payload.max_research_loops) == (1, 1)
    assert payload.reasoning_model == "gemini-2.5-flash"


def test_ask_renders_activity_as_markdown(agent, capsys):
    agent.on_submit = _answering

    cli_main.main(["ask", "question", "--show-activity", "--markdown"])

    out = capsys.readouterr().out
    assert out.endswith(
        "**Research activity**\n\n"
        "- **Generating Search Queries**: aurora, solar wind\n"
        "- **Finalizing Answer**: Composing and presenting the final answer.\n"
    )


def test_ask_uses_settings_defaults(agent, tmp_path, capsys):
    settings = tmp_path / "settings.toml"
    settings.write_text(
        '[research]\neffort = "high"\nreasoning_model = "gemini-2.5-pro"\n',
        encoding="utf-8",
    )
    agent.on_submit = _answering

    assert cli_main.main(["--settings", str(settings), "ask", "question"]) == 0

    payload = agent.submitted[0]
    assert payload.max_research_loops == 10
    assert payload.reasoning_model == "gemini-2.5-pro"
    assert "Research activity:" not in capsys.readouterr().out


def test_ask_blank_question_is_rejected(agent, capsys):
    assert cli_main.main(["ask", "   "]) == 2

    assert agent.submitted == []
    assert "empty" in capsys.readouterr().err


def test_ask_without_answer_fails(agent, capsys):
    agent.on_submit = lambda transport, payload: transport.set_thread(is_loading=False)

    assert cli_main.main(["ask", "question"]) == 1

    assert "without an answer" in capsys.readouterr().err


def test_ask_reports_transport_errors(agent, capsys):
    def _fail(transport, payload):
        raise TransportError("connection refused")

    agent.on_submit = _fail

    assert cli_main.main(["ask", "question"]) == 1

    assert "connection refused" in capsys.readouterr().err


def test_ask_interrupt_cancels_run(agent, capsys):
    def _interrupt(transport, payload):
        raise KeyboardInterrupt

    agent.on_submit = _interrupt

    assert cli_main.main(["ask", "question"]) == 130

    assert agent.stop_calls == 1
    assert "Cancelled." in capsys.readouterr().err


def test_invalid_settings_file_exits(tmp_path, capsys):
    settings = tmp_path / "settings.json"
    settings.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_main.main(["--settings", str(settings), "budget", "low"])

    assert excinfo.value.code == 2
    assert "cannot load settings" in capsys.readouterr().err


def test_ask_translates_timeline_with_configured_language(agent, tmp_path, capsys):
    settings = tmp_path / "settings.toml"
    settings.write_text('[ui]\nlanguage = "ru"\n', encoding="utf-8")
    agent.on_submit = _answering

    assert cli_main.main(["--settings", str(settings), "ask", "question"]) == 0

    assert capsys.readouterr().out.splitlines()[1] == (
        "2. Подготовка ответа: Составление и вывод итогового ответа."
    )
