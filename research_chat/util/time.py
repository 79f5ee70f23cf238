"""Time-related helpers for research_chat."""

from __future__ import annotations

import datetime
import time


def utc_now_iso() -> str:
    """Return current UTC time in ISO format without sub-second precision."""
    return datetime.datetime.now(datetime.UTC).isoformat(timespec="seconds")


def timestamp_message_id() -> str:
    """Return a message identifier derived from the current time in milliseconds.

    Two calls within the same millisecond yield the same identifier.
    """
    return str(time.time_ns() // 1_000_000)
