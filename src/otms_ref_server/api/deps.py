# src/otms_ref_server/api/deps.py
from __future__ import annotations

import os
from typing import Optional

from fastapi import Depends, Query

from otms_ref_server.config import settings
from otms_ref_server.infra.providers import get_annotation_store, get_proof_registry
from otms_ref_server.models import ViewMode
from otms_ref_server.ports.annotations import AnnotationStorePort
from otms_ref_server.services.annotations import AnnotationService
from otms_ref_server.services.proofs import ProofRegistry

_READ_ONLY_VALUES = {"read-only", "readonly", "public"}


def get_view_mode(view: Optional[str] = Query(default=None)) -> ViewMode:
    """`?view=public` (shared links) or OTMS_VIEW_MODE=read-only -> READ_ONLY."""
    if (view or "").strip().lower() == "public":
        return ViewMode.READ_ONLY
    configured = os.getenv("OTMS_VIEW_MODE", settings.VIEW_MODE).strip().lower()
    if configured in _READ_ONLY_VALUES:
        return ViewMode.READ_ONLY
    return ViewMode.INTERACTIVE


def get_annotation_service(
    store: AnnotationStorePort = Depends(get_annotation_store),
    registry: ProofRegistry = Depends(get_proof_registry),
) -> AnnotationService:
    return AnnotationService(store, registry)
