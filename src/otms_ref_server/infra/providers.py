# src/otms_ref_server/infra/providers.py
from __future__ import annotations

import os
import threading
from typing import Dict, Optional

from otms_ref_server.config import settings
from otms_ref_server.errors import ValidationError
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.ports.annotations import AnnotationStorePort
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.ports.signing import SigningProvider
from otms_ref_server.ports.submission import SubmissionPort
from otms_ref_server.protocol.base58 import is_public_key
from otms_ref_server.security.keypair_signer import KeypairSigner
from otms_ref_server.security.keys import load_signer_seed
from otms_ref_server.services.account import AccountLoader
from otms_ref_server.services.proofs import ProofRegistry
from .file_annotations import FileAnnotationStore
from .memory_annotations import MemoryAnnotationStore
from .solana_rpc import SolanaRpcClient

log = get_logger(__name__)

# singletons per-process
_annotations: Optional[AnnotationStorePort] = None
_rpc: Optional[SolanaRpcClient] = None
_registry: Optional[ProofRegistry] = None
_loaders: Dict[str, AccountLoader] = {}
_loaders_lock = threading.Lock()


def get_annotation_store() -> AnnotationStorePort:
    """
    Adapter selector. Default: in-memory for dev.
    OTMS_ANNOTATIONS=file keeps annotations in OTMS_DATA_DIR/annotations.json.
    """
    global _annotations
    if _annotations is None:
        backend = os.getenv("OTMS_ANNOTATIONS", settings.ANNOTATIONS_BACKEND).lower()
        if backend == "file":
            _annotations = FileAnnotationStore(settings.DATA_DIR / "annotations.json")
        else:
            if backend not in ("", "memory", "mem", "in-memory"):
                log.warning("unknown OTMS_ANNOTATIONS=%r; using memory", backend)
            _annotations = MemoryAnnotationStore()
    return _annotations


def _rpc_client() -> SolanaRpcClient:
    global _rpc
    if _rpc is None:
        _rpc = SolanaRpcClient(
            settings.RPC_URL,
            commitment=settings.COMMITMENT,
            timeout=settings.RPC_TIMEOUT_S,
            confirm_timeout=settings.CONFIRM_TIMEOUT_S,
            poll_interval=settings.CONFIRM_POLL_S,
        )
    return _rpc


def get_ledger() -> LedgerQueryPort:
    return _rpc_client()


def get_submission() -> SubmissionPort:
    return _rpc_client()


def get_signer() -> Optional[SigningProvider]:
    """Server-side keypair from OTMS_SIGNER_SEED, or None when not configured."""
    seed = load_signer_seed()
    if seed is None:
        return None
    signer = KeypairSigner.from_seed(seed)
    signer.connect()
    return signer


def get_proof_registry() -> ProofRegistry:
    global _registry
    if _registry is None:
        _registry = ProofRegistry()
    return _registry


def get_account_loader(treasury: str) -> AccountLoader:
    key = treasury.strip()
    if not is_public_key(key):
        raise ValidationError(f"Invalid treasury address: {key!r}")
    with _loaders_lock:
        loader = _loaders.get(key)
        if loader is None:
            loader = _loaders[key] = AccountLoader(limit=settings.HISTORY_LIMIT)
        return loader
