from __future__ import annotations

import copy
from typing import Any, Iterable, Optional


HIDDEN = "<hidden>"


def with_hidden_fields(source: Optional[Any], fields: Iterable[str]) -> Optional[Any]:
    """Return a deep copy of `source` with the given dotted paths replaced by '<hidden>'.

    - `fields` are dotted paths into nested dicts, e.g. ["apikey", "ow.auth"].
    - Paths that are missing or hold a falsy value are left untouched.
    - The input is never mutated. Non-dict inputs are returned as-is.
    """
    if not isinstance(source, dict):
        return source

    out = copy.deepcopy(source)
    for path in fields:
        parts = path.split(".")
        parent: Any = out
        for p in parts[:-1]:
            parent = parent.get(p) if isinstance(parent, dict) else None
        last = parts[-1]
        if isinstance(parent, dict) and parent.get(last):
            parent[last] = HIDDEN
    return out


__all__ = ["HIDDEN", "with_hidden_fields"]
