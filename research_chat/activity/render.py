"""Text renderings of activity timelines for terminals and markdown views."""

from __future__ import annotations

from collections.abc import Sequence

from ..i18n import _
from ..model import DisplayEntry


def render_entry_plain(entry: DisplayEntry, *, index: int | None = None) -> str:
    prefix = f"{index}. " if index is not None else ""
    if entry.data:
        return f"{prefix}{entry.title}: {entry.data}"
    return f"{prefix}{entry.title}"


def render_timeline_plain(entries: Sequence[DisplayEntry]) -> str:
    """Render *entries* as numbered lines; an empty timeline yields ``""``."""
    if not entries:
        return ""
    return "\n".join(
        render_entry_plain(entry, index=index)
        for index, entry in enumerate(entries, start=1)
    )


def render_timeline_markdown(
    entries: Sequence[DisplayEntry], *, heading: str | None = None
) -> str:
    if not entries:
        return ""
    lines = [f"**{heading or _('Research activity')}**", ""]
    for entry in entries:
        line = f"- **{entry.title}**"
        if entry.data:
            line += f": {entry.data}"
        lines.append(line)
    return "\n".join(lines)


__all__ = ["render_entry_plain", "render_timeline_markdown", "render_timeline_plain"]
