# src/otms_ref_server/infra/memory_annotations.py
from __future__ import annotations

import threading
from typing import Dict

from otms_ref_server.models import Annotation
from otms_ref_server.ports.annotations import AnnotationStorePort


class MemoryAnnotationStore(AnnotationStorePort):
    """
    Dev-only in-memory adapter (ephemeral).
    Set OTMS_ANNOTATIONS=file to keep annotations across restarts.
    """

    def __init__(self) -> None:
        self._db: Dict[str, Dict[str, Annotation]] = {}
        self._lock = threading.Lock()

    def get(self, account_id: str) -> Dict[str, Annotation]:
        with self._lock:
            return dict(self._db.get(account_id, {}))

    def put(self, account_id: str, annotations: Dict[str, Annotation]) -> None:
        with self._lock:
            self._db[account_id] = dict(annotations)
