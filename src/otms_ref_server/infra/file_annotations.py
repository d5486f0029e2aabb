# src/otms_ref_server/infra/file_annotations.py
from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict

from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import Annotation
from otms_ref_server.ports.annotations import AnnotationStorePort

log = get_logger(__name__)


def storage_key(account_id: str) -> str:
    return f"opentreasury:labels:{account_id.strip()}"


class FileAnnotationStore(AnnotationStorePort):
    """
    JSON file adapter: one document mapping storage keys to annotation sets.
    Writes go to a temp file first and are swapped in with os.replace.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def get(self, account_id: str) -> Dict[str, Annotation]:
        with self._lock:
            raw = self._read_all().get(storage_key(account_id)) or {}
        return {sig: Annotation.model_validate(item) for sig, item in raw.items()}

    def put(self, account_id: str, annotations: Dict[str, Annotation]) -> None:
        with self._lock:
            data = self._read_all()
            data[storage_key(account_id)] = {
                sig: ann.model_dump(mode="json", by_alias=True, exclude_none=True)
                for sig, ann in annotations.items()
            }
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".annotations-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False)
                os.replace(tmp, self._path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        log.debug("stored %d annotations for %s", len(annotations), account_id)
