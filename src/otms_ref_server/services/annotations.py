# src/otms_ref_server/services/annotations.py
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from otms_ref_server.errors import ReadOnlyViewError, ValidationError
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import Annotation, ViewMode
from otms_ref_server.ports.annotations import AnnotationStorePort
from otms_ref_server.protocol.document import import_ledger, make_annotation
from .proofs import ProofRegistry

log = get_logger(__name__)


def normalize_treasury(treasury: str) -> str:
    t = (treasury or "").strip()
    if not t:
        raise ValidationError("treasury is required")
    return t


def require_interactive(view: ViewMode) -> None:
    if view is ViewMode.READ_ONLY:
        raise ReadOnlyViewError("This is a read-only view")


def _matches(signature: str, ann: Annotation, q: str) -> bool:
    haystack = (
        signature,
        ann.label.value,
        ann.description or "",
        ann.custom_category or "",
        ann.proof_url or "",
    )
    return any(q in field.lower() for field in haystack)


class AnnotationService:
    """
    Save / clear / import annotations for a treasury.

    Every mutation drops the treasury's ProofRecord so a digest built from an
    older annotation set can never be anchored.
    """

    def __init__(self, store: AnnotationStorePort, registry: ProofRegistry) -> None:
        self._store = store
        self._registry = registry

    def list(self, treasury: str, q: Optional[str] = None) -> Dict[str, Annotation]:
        items = self._store.get(normalize_treasury(treasury))
        needle = (q or "").strip().lower()
        if not needle:
            return items
        return {sig: ann for sig, ann in items.items() if _matches(sig, ann, needle)}

    def get(self, treasury: str, signature: str) -> Annotation:
        items = self._store.get(normalize_treasury(treasury))
        if signature not in items:
            raise KeyError(signature)
        return items[signature]

    def save(self, treasury: str, signature: str, fields: Dict[str, Any], view: ViewMode) -> Annotation:
        require_interactive(view)
        treasury = normalize_treasury(treasury)
        signature = (signature or "").strip()
        if not signature:
            raise ValidationError("transaction signature is required")
        annotation = make_annotation(**fields)

        items = self._store.get(treasury)
        items[signature] = annotation
        self._store.put(treasury, items)
        self._registry.invalidate(treasury)
        log.info("annotation saved: %s %s -> %s", treasury, signature, annotation.label.value)
        return annotation

    def clear(self, treasury: str, signature: str, view: ViewMode) -> None:
        require_interactive(view)
        treasury = normalize_treasury(treasury)
        items = self._store.get(treasury)
        if signature not in items:
            raise KeyError(signature)
        del items[signature]
        self._store.put(treasury, items)
        self._registry.invalidate(treasury)
        log.info("annotation removed: %s %s", treasury, signature)

    def import_file(self, treasury: str, payload: Any, view: ViewMode) -> Tuple[str, int]:
        require_interactive(view)
        treasury = normalize_treasury(treasury)
        fmt, items = import_ledger(payload)
        self._store.put(treasury, items)
        self._registry.invalidate(treasury)
        log.info("imported %d annotations (%s) for %s", len(items), fmt, treasury)
        return fmt, len(items)
