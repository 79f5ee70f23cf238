"""Entry point for the command-line interface."""

from __future__ import annotations

import argparse

from research_chat import i18n
from research_chat.i18n import _
from research_chat.log import configure_logging
from research_chat.settings import AppSettings, load_app_settings

from .commands import COMMANDS


def build_parser() -> argparse.ArgumentParser:
    """Construct argument parser for CLI commands."""
    parser = argparse.ArgumentParser(
        prog="research-chat", description=_("Research agent chat client")
    )
    parser.add_argument(
        "--settings",
        help=_("path to JSON/TOML settings"),
    )
    sub = parser.add_subparsers(dest="command", required=True)
    for name, cmd in COMMANDS.items():
        p = sub.add_parser(name, help=cmd.help)
        cmd.add_arguments(p)
        p.set_defaults(func=cmd.func)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = AppSettings()
    if args.settings:
        try:
            settings = load_app_settings(args.settings)
        except (OSError, ValueError) as exc:
            parser.error(_("cannot load settings: {error}").format(error=exc))
    configure_logging(settings.ui.log_level)
    i18n.install(settings.ui.language)
    args.app_settings = settings
    return args.func(args) or 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
