# leadmatch/domain/parsing.py
from __future__ import annotations

from typing import Any


def to_float(x: Any) -> float | None:
    if x is None or x == "" or isinstance(x, bool):
        return None
    try:
        return float(x)
    except (TypeError, ValueError):
        return None


def to_str_set(x: Any) -> frozenset[str]:
    """
    Lists/sets/tuples of names -> frozenset of their string values.
    Enum members collapse to their value so "Villa" and PropertyType.villa compare equal.
    """
    if x is None:
        return frozenset()
    if isinstance(x, str):
        x = [x]
    if not isinstance(x, (list, tuple, set, frozenset)):
        return frozenset()
    out: set[str] = set()
    for v in x:
        v = getattr(v, "value", v)
        if isinstance(v, str) and v:
            out.add(v)
    return frozenset(out)


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None
