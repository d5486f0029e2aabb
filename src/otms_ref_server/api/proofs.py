# src/otms_ref_server/api/proofs.py
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from otms_ref_server.config import settings
from otms_ref_server.errors import NoSigner, NothingToAnchor
from otms_ref_server.infra.providers import get_ledger, get_proof_registry, get_signer, get_submission
from otms_ref_server.models import AnchorReceipt, ProofRecord, VerifyResult, ViewMode
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.ports.signing import SigningProvider
from otms_ref_server.ports.submission import SubmissionPort
from otms_ref_server.services.anchor import anchor
from otms_ref_server.services.annotations import AnnotationService, normalize_treasury, require_interactive
from otms_ref_server.services.proofs import ProofRegistry, generate_proof
from otms_ref_server.services.verify import verify, verify_document
from .deps import get_annotation_service, get_view_mode


class VerifyIn(BaseModel):
    transaction_id: str = Field(default="", description="On-chain transaction signature")
    document_json: Optional[str] = Field(default=None, description="OTMS JSON text exactly as published")
    document: Optional[Any] = Field(default=None, description="OTMS document as a JSON value")


router = APIRouter(tags=["proofs"])


@router.post("/treasuries/{treasury}/proof", response_model=ProofRecord, status_code=status.HTTP_201_CREATED)
def create_proof(
    treasury: str,
    service: AnnotationService = Depends(get_annotation_service),
    registry: ProofRegistry = Depends(get_proof_registry),
) -> ProofRecord:
    treasury = normalize_treasury(treasury)
    record = generate_proof(treasury, settings.CLUSTER, service.list(treasury))
    registry.put(record)
    return record


@router.get("/treasuries/{treasury}/proof", response_model=ProofRecord)
def get_proof(
    treasury: str,
    service: AnnotationService = Depends(get_annotation_service),
    registry: ProofRegistry = Depends(get_proof_registry),
) -> ProofRecord:
    treasury = normalize_treasury(treasury)
    record = registry.current(treasury, service.list(treasury))
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No current proof; generate one first")
    return record


@router.post("/treasuries/{treasury}/proof/anchor", response_model=AnchorReceipt)
def anchor_proof(
    treasury: str,
    view: ViewMode = Depends(get_view_mode),
    service: AnnotationService = Depends(get_annotation_service),
    registry: ProofRegistry = Depends(get_proof_registry),
    signer: Optional[SigningProvider] = Depends(get_signer),
    submission: SubmissionPort = Depends(get_submission),
    ledger: LedgerQueryPort = Depends(get_ledger),
) -> AnchorReceipt:
    require_interactive(view)
    if signer is None or not signer.identity:
        raise NoSigner("Connect your wallet first.")
    treasury = normalize_treasury(treasury)
    record = registry.current(treasury, service.list(treasury))
    if record is None:
        raise NothingToAnchor("Generate proof first (hash is empty).")

    receipt = anchor(treasury, record.digest_hex, signer, submission, ledger)
    registry.put(record.model_copy(update={"anchor_tx_id": receipt.transaction_id}))
    return receipt


@router.post("/proofs/verify", response_model=VerifyResult)
def verify_proof(body: VerifyIn, ledger: LedgerQueryPort = Depends(get_ledger)) -> VerifyResult:
    if body.document_json is not None:
        return verify(body.transaction_id, body.document_json, ledger)
    return verify_document(body.transaction_id, body.document, ledger)
