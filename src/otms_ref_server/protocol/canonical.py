# src/otms_ref_server/protocol/canonical.py
"""
Deterministic JSON text for content addressing.

Every proof ever issued depends on this output being byte-identical for equal
content, so the rules are fixed:
  - object keys sorted by code point at every depth
  - arrays keep their order
  - integral floats are written as integers (1.0 -> 1)
  - two-space indentation with "," ending each item line and ": " after keys
  - non-ASCII text is emitted as UTF-8, not \\u escapes
  - NaN and infinities are rejected
A container that is reached again while it is still being walked (a cycle) is
written as null instead of being followed.
"""

from __future__ import annotations

import json
from typing import Any, Set

_MAX_SAFE_INTEGER = 2 ** 53


def _sorted_copy(value: Any, active: Set[int]) -> Any:
    if isinstance(value, dict):
        marker = id(value)
        if marker in active:
            return None
        active.add(marker)
        try:
            out = {}
            for key in sorted(value):
                if not isinstance(key, str):
                    raise TypeError(f"object keys must be strings, got {type(key).__name__}")
                out[key] = _sorted_copy(value[key], active)
            return out
        finally:
            active.discard(marker)

    if isinstance(value, (list, tuple)):
        marker = id(value)
        if marker in active:
            return None
        active.add(marker)
        try:
            return [_sorted_copy(item, active) for item in value]
        finally:
            active.discard(marker)

    if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_SAFE_INTEGER:
        return int(value)

    return value


def canonicalize(value: Any) -> str:
    """Return the canonical text of a JSON-like value."""
    return json.dumps(
        _sorted_copy(value, set()),
        indent=2,
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_bytes(value: Any) -> bytes:
    return canonicalize(value).encode("utf-8")
