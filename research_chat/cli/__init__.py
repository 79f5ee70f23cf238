"""Command-line interface package for research_chat.

:func:`main` is exposed via attribute access (``from research_chat.cli import
main``) and imported lazily so that ``research_chat.cli.main`` remains
importable as a module.
"""

from importlib import import_module
from typing import Any


def __getattr__(name: str) -> Any:
    if name == "main":
        return import_module(".main", __name__).main
    raise AttributeError(f"module {__name__!r} has no attribute {name}")


__all__ = ["main"]
