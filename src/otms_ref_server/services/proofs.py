# src/otms_ref_server/services/proofs.py
from __future__ import annotations

import threading
from typing import Dict, Mapping, Optional

from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import Annotation, ProofRecord
from otms_ref_server.protocol.canonical import canonicalize
from otms_ref_server.protocol.document import build
from otms_ref_server.protocol.hashing import digest, digest_value

log = get_logger(__name__)


def annotations_fingerprint(annotations: Mapping[str, Annotation]) -> str:
    return digest_value({
        sig: ann.model_dump(mode="json", by_alias=True, exclude_none=True)
        for sig, ann in annotations.items()
    })


def generate_proof(
    treasury: str,
    cluster_id: str,
    annotations: Mapping[str, Annotation],
    exported_at: Optional[str] = None,
) -> ProofRecord:
    document = build(treasury, cluster_id, annotations, exported_at=exported_at)
    canonical_json = canonicalize(document.to_wire())
    record = ProofRecord(
        treasury=document.treasury,
        canonical_json=canonical_json,
        digest_hex=digest(canonical_json.encode("utf-8")),
        fingerprint=annotations_fingerprint(annotations),
    )
    log.info("proof generated for %s: %s (%d entries)", record.treasury, record.digest_hex, len(document.entries))
    return record


class ProofRegistry:
    """Latest ProofRecord per treasury. Records are dropped, never patched."""

    def __init__(self) -> None:
        self._records: Dict[str, ProofRecord] = {}
        self._lock = threading.Lock()

    def get(self, treasury: str) -> Optional[ProofRecord]:
        with self._lock:
            return self._records.get(treasury)

    def put(self, record: ProofRecord) -> None:
        with self._lock:
            self._records[record.treasury] = record

    def invalidate(self, treasury: str) -> None:
        with self._lock:
            if self._records.pop(treasury, None) is not None:
                log.debug("proof for %s invalidated", treasury)

    def current(self, treasury: str, annotations: Mapping[str, Annotation]) -> Optional[ProofRecord]:
        """The stored record, if it was built from exactly ``annotations``."""
        record = self.get(treasury)
        if record is None or record.fingerprint != annotations_fingerprint(annotations):
            return None
        return record
