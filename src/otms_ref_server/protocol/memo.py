# src/otms_ref_server/protocol/memo.py
"""
Anchor memo text.

Wire layout (UTF-8, newline separated):

    OpenTreasury Proof (OTMS v1)
    Treasury: <treasury>
    Hash: <digest hex>
    Timestamp: <ISO-8601>

Decoding finds fields by case-insensitive prefix, so extra lines and any line
order produced by third-party re-encoders are accepted.
"""

from __future__ import annotations

from typing import List, Optional

from otms_ref_server.models import AnchorMemo, OTMS_STANDARD, OTMS_VERSION, PROTOCOL_NAME

MEMO_LABEL = f"{PROTOCOL_NAME} Proof ({OTMS_STANDARD} v{OTMS_VERSION})"

_TREASURY = "Treasury:"
_HASH = "Hash:"
_TIMESTAMP = "Timestamp:"
_FIELDS = (_TREASURY, _HASH, _TIMESTAMP)


class MissingHashLine(ValueError):
    """Memo text has no (non-empty) Hash: line."""


def encode(treasury: str, digest_hex: str, timestamp_iso: str) -> str:
    return "\n".join([
        MEMO_LABEL,
        f"{_TREASURY} {treasury}",
        f"{_HASH} {digest_hex}",
        f"{_TIMESTAMP} {timestamp_iso}",
    ])


def _has_prefix(line: str, prefix: str) -> bool:
    return line[: len(prefix)].lower() == prefix.lower()


def _field(lines: List[str], prefix: str) -> Optional[str]:
    for line in lines:
        if _has_prefix(line, prefix):
            return line[len(prefix):].strip()
    return None


def decode(memo_text: str) -> AnchorMemo:
    lines = [line.strip() for line in memo_text.splitlines()]

    digest_hex = _field(lines, _HASH)
    if not digest_hex:
        raise MissingHashLine("Memo found but could not read Hash line.")

    label = next(
        (line for line in lines if line and not any(_has_prefix(line, f) for f in _FIELDS)),
        "",
    )
    return AnchorMemo(
        label=label,
        treasury=_field(lines, _TREASURY) or "",
        digest_hex=digest_hex,
        timestamp_iso=_field(lines, _TIMESTAMP) or "",
    )
