# src/otms_ref_server/protocol/document.py
"""
OTMS document building and ledger-file import.

Entries are ordered by transaction signature so the digest never depends on
the iteration order of whatever store held the annotations.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from otms_ref_server.errors import ParseError, ValidationError
from otms_ref_server.models import Annotation, AnnotationLabel, OTMSDocument, OTMSEntry

_OTHER = "Other"
_SEP = " | "


def utc_iso(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def make_annotation(**fields: Any) -> Annotation:
    try:
        return Annotation.model_validate(fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        msg = str(first.get("msg", "invalid annotation")).removeprefix("Value error, ")
        raise ValidationError(msg, details={"errors": e.errors(include_url=False, include_context=False)})


# ---------- legacy note packing ----------

def pack_note(annotation: Annotation) -> str:
    """Flatten an annotation into the exported ``description`` string."""
    desc = annotation.description or ""
    if annotation.label is AnnotationLabel.OTHER:
        custom = annotation.custom_category or ""
        base = f"{_OTHER}: {custom}" if custom else _OTHER
        if desc:
            return f"{base}{_SEP}{desc}"
        return base if custom else ""
    return desc


def unpack_note(label: AnnotationLabel, note: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Inverse of ``pack_note``: returns ``(custom_category, description)``."""
    note = (note or "").strip()
    if label is not AnnotationLabel.OTHER or not note:
        return None, note or None

    head, sep, tail = note.partition(_SEP)
    tail = tail.strip() if sep else ""
    if head.lower() == _OTHER.lower():
        return None, tail or None
    if head[: len(_OTHER) + 1].lower() == f"{_OTHER.lower()}:":
        return head[len(_OTHER) + 1:].strip() or None, tail or None
    return None, note


# ---------- build ----------

def to_entry(signature: str, annotation: Annotation) -> OTMSEntry:
    return OTMSEntry(
        signature=signature,
        category=annotation.label,
        description=pack_note(annotation),
        proof_url=annotation.proof_url or "",
    )


def build(
    treasury: str,
    cluster_id: str,
    annotations: Mapping[str, Annotation],
    exported_at: Optional[str] = None,
) -> OTMSDocument:
    return OTMSDocument(
        cluster=cluster_id,
        treasury=treasury.strip(),
        exported_at=exported_at or utc_iso(),
        entries=[to_entry(sig, annotations[sig]) for sig in sorted(annotations)],
    )


# ---------- import ----------

def _label(raw: Any) -> AnnotationLabel:
    if raw in (None, ""):
        return AnnotationLabel.OTHER
    try:
        return AnnotationLabel(raw)
    except ValueError:
        raise ValidationError(f"unknown category {raw!r}")


def _text(value: Any, field: str, signature: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ParseError(f"{field} for {signature} must be a string")


def _from_legacy(meta: Mapping[str, Any]) -> Dict[str, Annotation]:
    out: Dict[str, Annotation] = {}
    for signature, m in meta.items():
        if not isinstance(m, dict):
            raise ParseError(f"ledger entry for {signature} is not an object")
        label = _label(m.get("label"))
        custom, desc = unpack_note(label, _text(m.get("note"), "note", signature))
        url = _text(m.get("proofUrl"), "proofUrl", signature)
        out[signature] = make_annotation(
            label=label, description=desc, custom_category=custom, proof_url=url or None,
        )
    return out


def _from_otms(entries: list) -> Dict[str, Annotation]:
    out: Dict[str, Annotation] = {}
    for e in entries:
        if not isinstance(e, dict) or not e.get("signature"):
            continue
        signature = _text(e["signature"], "signature", e["signature"])
        label = _label(e.get("category"))
        custom, desc = unpack_note(label, _text(e.get("description"), "description", signature))
        url = _text(e.get("proofUrl"), "proofUrl", signature)
        out[signature] = make_annotation(
            label=label, description=desc, custom_category=custom, proof_url=url or None,
        )
    return out


def import_ledger(payload: Any) -> Tuple[str, Dict[str, Annotation]]:
    """
    Read an exported ledger file.

    Accepts the legacy ``{"meta": {signature: {label, note, proofUrl}}}`` shape
    or an OTMS document. Returns ``("legacy" | "otms", annotations)``.
    """
    if isinstance(payload, dict):
        meta = payload.get("meta")
        if isinstance(meta, dict):
            return "legacy", _from_legacy(meta)
        entries = payload.get("entries")
        if isinstance(entries, list):
            return "otms", _from_otms(entries)
    raise ParseError("Invalid ledger file.")
