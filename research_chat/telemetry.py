"""Structured telemetry events written through the package logger.

An event is an ordinary log record whose message is the event name.  Its
``json`` extra holds ``event``, ``payload`` and ``size_bytes``, plus
``duration_ms`` for timed events; :class:`research_chat.log.JsonFormatter`
merges those fields into the JSONL log.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import Any

from .log import logger
from .util.json import make_json_safe

SENSITIVE_KEYS = frozenset(
    {
        "api_key",
        "x-api-key",
        "authorization",
        "cookie",
        "password",
        "secret",
        "token",
    }
)

REDACTED = "[REDACTED]"


def _is_sensitive(key: object) -> bool:
    return isinstance(key, str) and key.lower() in SENSITIVE_KEYS


def redact(value: Any) -> Any:
    """Return *value* with the values of sensitive mapping keys masked.

    Nested mappings and sequences are walked; the input is never modified.
    """
    if isinstance(value, Mapping):
        return {
            key: REDACTED if _is_sensitive(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def _event_fields(
    event: str, payload: Mapping[str, Any] | None, start_time: float | None
) -> dict[str, Any]:
    safe_payload = make_json_safe(redact(payload)) if payload else {}
    fields: dict[str, Any] = {
        "event": event,
        "payload": safe_payload,
        "size_bytes": (
            len(json.dumps(safe_payload, ensure_ascii=False).encode("utf-8"))
            if safe_payload
            else 0
        ),
    }
    if start_time is not None:
        fields["duration_ms"] = round((time.monotonic() - start_time) * 1000)
    return fields


def log_event(
    event: str,
    payload: Mapping[str, Any] | None = None,
    *,
    start_time: float | None = None,
    level: int = logging.INFO,
) -> None:
    """Record *event* with a redacted copy of *payload*.

    Nothing is serialised when *level* is disabled, so verbose DEBUG dumps such
    as ``STREAM_REQUEST`` cost nothing in normal runs.  *start_time* is a
    :func:`time.monotonic` reading; the elapsed milliseconds are recorded.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, event, extra={"json": _event_fields(event, payload, start_time)})


__all__ = ["REDACTED", "SENSITIVE_KEYS", "log_event", "redact"]
