"""JSON serialisation helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any


def make_json_safe(
    value: Any,
    *,
    sort_sets: bool = True,
    default: Callable[[Any], str] | None = None,
) -> Any:
    """Return a structure compatible with :func:`json.dumps`.

    Mapping keys are stringified, tuples become lists and objects that are not
    natively serialisable fall back to ``default`` (``repr`` when omitted).
    """

    if default is None:
        default = repr

    def _convert(item: Any) -> Any:
        if isinstance(item, Mapping):
            return {str(key): _convert(val) for key, val in item.items()}
        if isinstance(item, (list, tuple)):
            return [_convert(val) for val in item]
        if isinstance(item, (set, frozenset)):
            converted = [_convert(val) for val in item]
            if sort_sets:
                converted.sort(key=repr)
            return converted
        if isinstance(item, (str, int, float, bool)) or item is None:
            return item
        to_dict = getattr(item, "to_dict", None)
        if callable(to_dict):
            try:
                return _convert(to_dict())
            except Exception:
                pass
        try:
            return default(item)
        except Exception:
            return f"<unserialisable {type(item).__name__}>"

    return _convert(value)


__all__ = ["make_json_safe"]
