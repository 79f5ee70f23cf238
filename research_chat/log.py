"""Logging setup for research_chat.

Package modules log through children of the ``research_chat`` logger.
:func:`configure_logging` attaches three handlers to it: the console at the
user's level, plus a text log and a JSONL log that always receive DEBUG.  The
log directory is ``$RESEARCH_CHAT_LOG_DIR`` or ``~/.research_chat/logs``.
"""

from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .util.time import utc_now_iso

LOG_DIR_ENV = "RESEARCH_CHAT_LOG_DIR"
TEXT_LOG_NAME = "research_chat.log"
JSONL_LOG_NAME = "research_chat.jsonl"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUPS = 5

logger = logging.getLogger("research_chat")

_console: logging.Handler | None = None
_log_dir: Path | None = None


def _telemetry_fields(record: logging.LogRecord) -> dict[str, Any] | None:
    fields = getattr(record, "json", None)
    return fields if isinstance(fields, dict) else None


class ConsoleFormatter(logging.Formatter):
    """``LEVEL: message`` lines; telemetry events also show their payload."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _telemetry_fields(record)
        if fields is None or fields.get("event") != record.getMessage():
            return line
        payload = fields.get("payload")
        if not payload:
            return line
        return f"{line} {json.dumps(payload, ensure_ascii=False, default=str)}"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object.

    Telemetry fields attached by :func:`research_chat.telemetry.log_event` are
    merged at the top level; any other ``json`` extra is stored under
    ``data``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = _telemetry_fields(record)
        if fields is not None:
            entry.update(fields)
        elif getattr(record, "json", None) is not None:
            entry["data"] = record.json
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class JsonlHandler(RotatingFileHandler):
    """Rotating file handler writing :class:`JsonFormatter` lines."""

    def __init__(self, filename: Path | str, *, max_bytes: int = _MAX_BYTES) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(path, maxBytes=max_bytes, backupCount=_BACKUPS, encoding="utf-8")
        self.setFormatter(JsonFormatter())


def resolve_log_dir(log_dir: str | Path | None = None) -> Path:
    """Return the directory for log files, creating it when missing."""
    if log_dir is None:
        env_dir = os.environ.get(LOG_DIR_ENV)
        log_dir = env_dir or Path.home() / ".research_chat" / "logs"
    path = Path(log_dir).expanduser().resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(
    level: int = logging.WARNING, *, log_dir: str | Path | None = None
) -> Path:
    """Attach the package handlers and return the log directory.

    Handlers are installed on the first call only; later calls just move the
    console threshold to *level*.
    """
    global _console, _log_dir

    if _console is not None and _log_dir is not None:
        _console.setLevel(level)
        return _log_dir

    directory = resolve_log_dir(log_dir)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())

    text_file = RotatingFileHandler(
        directory / TEXT_LOG_NAME,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    text_file.setLevel(logging.DEBUG)
    text_file.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    jsonl_file = JsonlHandler(directory / JSONL_LOG_NAME)
    jsonl_file.setLevel(logging.DEBUG)

    for handler in (console, text_file, jsonl_file):
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    _console = console
    _log_dir = directory
    return directory


__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "JsonlHandler",
    "configure_logging",
    "logger",
    "resolve_log_dir",
]
