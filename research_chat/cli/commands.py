"""Command implementations for the CLI interface."""

from __future__ import annotations

import argparse
import itertools
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from research_chat.activity import (
    ResearchChatCoordinator,
    ResearchChatSession,
    render_timeline_markdown,
    render_timeline_plain,
)
from research_chat.activity.render import render_entry_plain
from research_chat.agent.effort import EffortLevel, derive_research_budget
from research_chat.i18n import _
from research_chat.model import DisplayEntry
from research_chat.transport import LangGraphStreamTransport, StreamTransport, TransportError

EFFORT_CHOICES = [level.value for level in EffortLevel]


@dataclass
class Command:
    """Describe a CLI command and its argument handler."""

    func: Callable[[argparse.Namespace], int | None]
    help: str
    add_arguments: Callable[[argparse.ArgumentParser], None]


def build_transport(args: argparse.Namespace) -> StreamTransport:
    """Create the transport used by ``ask``; tests replace this hook."""
    settings = args.app_settings
    return LangGraphStreamTransport(settings.stream, dev=True if args.dev else None)


def cmd_ask(
    args: argparse.Namespace,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run one research turn and print its activity and answer."""
    out = out or sys.stdout
    err = err or sys.stderr
    settings = args.app_settings
    effort = args.effort or settings.research.effort
    model = args.model or settings.research.reasoning_model

    transport = build_transport(args)
    session = ResearchChatSession()
    coordinator = ResearchChatCoordinator(session=session, transport=transport)

    counter = itertools.count(1)

    def _print_entry(entry: DisplayEntry) -> None:
        out.write(render_entry_plain(entry, index=next(counter)) + "\n")
        out.flush()

    session.events.entry_added.connect(_print_entry)

    try:
        submitted = coordinator.submit(args.question, effort, model)
    except KeyboardInterrupt:
        coordinator.cancel()
        err.write(_("Cancelled.") + "\n")
        return 130
    except TransportError as exc:
        err.write(_("Agent request failed: {error}").format(error=exc) + "\n")
        return 1
    if not submitted:
        err.write(_("Nothing to ask: the question is empty.") + "\n")
        return 2

    messages = transport.messages
    answer = messages[-1] if messages and messages[-1].is_ai else None
    if answer is None:
        err.write(_("The agent finished without an answer.") + "\n")
        return 1
    out.write("\n" + answer.content.rstrip() + "\n")
    if args.show_activity:
        activity = session.activity_for(answer.id)
        if activity and args.markdown:
            out.write("\n" + render_timeline_markdown(activity) + "\n")
        elif activity:
            out.write("\n" + _("Research activity:") + "\n")
            out.write(render_timeline_plain(activity) + "\n")
    return 0


def add_ask_arguments(p: argparse.ArgumentParser) -> None:
    """Configure parser for the ``ask`` command."""
    p.add_argument("question", help=_("question for the research agent"))
    p.add_argument(
        "--effort",
        help=_("research effort: low, medium or high"),
    )
    p.add_argument("--model", help=_("reasoning model identifier"))
    p.add_argument(
        "--dev",
        action="store_true",
        help=_("use the development server endpoint"),
    )
    p.add_argument(
        "--show-activity",
        action="store_true",
        help=_("repeat the archived research activity after the answer"),
    )
    p.add_argument(
        "--markdown",
        action="store_true",
        help=_("render the archived activity as markdown"),
    )


def cmd_budget(args: argparse.Namespace, *, out: TextIO | None = None) -> int:
    """Print the query and loop budget derived from an effort level."""
    out = out or sys.stdout
    budget = derive_research_budget(args.effort)
    out.write(
        json.dumps(
            {
                "effort": args.effort,
                "initial_search_query_count": budget.initial_search_query_count,
                "max_research_loops": budget.max_research_loops,
            },
            ensure_ascii=False,
            indent=2,
            sort_keys=True,
        )
        + "\n"
    )
    return 0


def add_budget_arguments(p: argparse.ArgumentParser) -> None:
    """Configure parser for the ``budget`` command."""
    p.add_argument(
        "effort",
        help=_("effort level ({choices})").format(choices=", ".join(EFFORT_CHOICES)),
    )


COMMANDS: dict[str, Command] = {
    "ask": Command(cmd_ask, _("ask the research agent a question"), add_ask_arguments),
    "budget": Command(
        cmd_budget, _("show the research budget for an effort level"), add_budget_arguments
    ),
}
