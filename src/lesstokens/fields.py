"""Optional-field access for loosely-shaped remote payloads.

Remote payloads may omit a field, send null, or use a different name for the
same concept depending on the API version. ``pick_field`` looks up a fixed,
ordered list of aliases and falls back to a default instead of raising.
"""

from collections.abc import Mapping
from typing import Any


def pick_field(source: Any, *names: str, default: Any = None) -> Any:
    """Return the first non-None value among ``names`` on ``source``.

    ``source`` may be a mapping (decoded JSON) or an object exposing the names
    as attributes (vendor SDK models). ``None`` values count as absent.
    """
    if source is None:
        return default
    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return default


def pick_int(source: Any, *names: str) -> int:
    """Like pick_field for token counts: missing or non-numeric values become 0."""
    value = pick_field(source, *names, default=0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


__all__ = ["pick_field", "pick_int"]
