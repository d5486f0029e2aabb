# src/otms_ref_server/api/annotations.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from otms_ref_server.config import settings
from otms_ref_server.models import Annotation, ViewMode
from otms_ref_server.protocol.canonical import canonicalize
from otms_ref_server.protocol.document import build
from otms_ref_server.services.annotations import AnnotationService
from .deps import get_annotation_service, get_view_mode


# ---------- Pydantic models ----------
class AnnotationIn(BaseModel):
    label: str = Field(..., description="Donation | Grant | Ops | Milestone | Other")
    description: Optional[str] = None
    custom_category: Optional[str] = Field(default=None, alias="customCategory", description="Only with label Other")
    proof_url: Optional[str] = Field(default=None, alias="proofUrl", description="http(s) link to supporting evidence")

    model_config = ConfigDict(populate_by_name=True)


class AnnotationOut(BaseModel):
    signature: str
    label: str
    description: Optional[str] = None
    customCategory: Optional[str] = None
    proofUrl: Optional[str] = None


class AnnotationListOut(BaseModel):
    treasury: str
    count: int
    items: List[AnnotationOut]


class ImportOut(BaseModel):
    treasury: str
    format: str
    imported: int


def _out(signature: str, ann: Annotation) -> AnnotationOut:
    return AnnotationOut(signature=signature, **ann.model_dump(mode="json", by_alias=True))


router = APIRouter(prefix="/treasuries/{treasury}", tags=["annotations"])


@router.get("/annotations", response_model=AnnotationListOut)
def list_annotations(
    treasury: str,
    q: Optional[str] = Query(default=None, description="Case-insensitive search"),
    service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationListOut:
    items = service.list(treasury, q=q)
    out = [_out(sig, ann) for sig, ann in sorted(items.items())]
    return AnnotationListOut(treasury=treasury.strip(), count=len(out), items=out)


@router.get("/export")
def export_document(
    treasury: str,
    service: AnnotationService = Depends(get_annotation_service),
) -> Response:
    document = build(treasury, settings.CLUSTER, service.list(treasury))
    filename = f"opentreasury-otms-{document.treasury[:6]}.json"
    return Response(
        content=canonicalize(document.to_wire()),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportOut)
def import_document(
    treasury: str,
    payload: Dict[str, Any] = Body(...),
    view: ViewMode = Depends(get_view_mode),
    service: AnnotationService = Depends(get_annotation_service),
) -> ImportOut:
    fmt, count = service.import_file(treasury, payload, view)
    return ImportOut(treasury=treasury.strip(), format=fmt, imported=count)


# ----- Param routes -----

@router.get("/annotations/{signature}", response_model=AnnotationOut)
def get_annotation(
    treasury: str,
    signature: str,
    service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationOut:
    try:
        return _out(signature, service.get(treasury, signature))
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Annotation not found")


@router.put("/annotations/{signature}", response_model=AnnotationOut)
def save_annotation(
    treasury: str,
    signature: str,
    body: AnnotationIn,
    view: ViewMode = Depends(get_view_mode),
    service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationOut:
    ann = service.save(treasury, signature, body.model_dump(), view)
    return _out(signature.strip(), ann)


@router.delete("/annotations/{signature}", status_code=status.HTTP_204_NO_CONTENT)
def clear_annotation(
    treasury: str,
    signature: str,
    view: ViewMode = Depends(get_view_mode),
    service: AnnotationService = Depends(get_annotation_service),
) -> Response:
    try:
        service.clear(treasury, signature, view)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Annotation not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
