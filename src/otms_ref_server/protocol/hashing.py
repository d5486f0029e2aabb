from __future__ import annotations

import hashlib
from typing import Any, Mapping, Union

from otms_ref_server.models import OTMSDocument
from .canonical import canonical_bytes


def digest(data: bytes) -> str:
    """Lowercase hex SHA-256 of ``data``."""
    return hashlib.sha256(data).hexdigest()


def digest_value(value: Any) -> str:
    """Digest of the canonical form of a JSON-like value."""
    return digest(canonical_bytes(value))


def content_digest(document: Union[OTMSDocument, Mapping[str, Any]]) -> str:
    """
    Digest of a document with ``exportedAt`` removed.

    The full digest changes on every export because the timestamp is part of
    the hashed content; this one only changes when the entries, treasury or
    cluster change.
    """
    wire = document.to_wire() if isinstance(document, OTMSDocument) else dict(document)
    wire.pop("exportedAt", None)
    return digest_value(wire)
