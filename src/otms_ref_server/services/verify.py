# src/otms_ref_server/services/verify.py
"""
Verifier: does transaction X attest to exactly this document?

Every outcome, including "not verified", is returned as a VerifyResult. Phases
run Idle -> Fetching -> Decoding -> Comparing and each call starts from Idle.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from otms_ref_server.errors import OTMSException
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import MEMO_PROGRAM_ID, VerifyPhase, VerifyResult, VerifyStatus
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.protocol.base58 import b58decode
from otms_ref_server.protocol.canonical import canonical_bytes
from otms_ref_server.protocol.hashing import digest
from otms_ref_server.protocol.memo import MissingHashLine, decode

log = get_logger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _instructions(tx: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
    message = (tx.get("transaction") or {}).get("message") or {}
    return [ix for ix in message.get("instructions") or [] if isinstance(ix, dict)]


def find_memo_instruction(tx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for ix in _instructions(tx):
        if str(ix.get("programId") or "") == MEMO_PROGRAM_ID:
            return ix
    return None


def extract_memo_text(ix: Dict[str, Any]) -> Optional[str]:
    """Memo text from a parsed instruction; RPC nodes disagree on the shape."""
    parsed = ix.get("parsed")
    if isinstance(parsed, str):
        return parsed or None
    if isinstance(parsed, dict) and isinstance(parsed.get("memo"), str):
        return parsed["memo"] or None
    data = ix.get("data")
    if isinstance(data, str) and data:
        try:
            return b58decode(data).decode("utf-8") or None
        except (ValueError, UnicodeDecodeError):
            return None
    return None


def verify(transaction_id: str, document_json_text: str, ledger: LedgerQueryPort) -> VerifyResult:
    phase = VerifyPhase.IDLE

    def result(status: VerifyStatus, message: str, **fields: Any) -> VerifyResult:
        log.info("verify %s: %s at %s", transaction_id or "-", status.value, phase.value)
        return VerifyResult(status=status, phase=phase, message=message, **fields)

    sig = (transaction_id or "").strip()
    text = (document_json_text or "").strip()
    if not sig:
        return result(VerifyStatus.MISSING_INPUT, "Paste a tx signature first.")
    if not text:
        return result(VerifyStatus.MISSING_INPUT, "Paste OTMS JSON first.")

    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
        # out-of-range numbers such as 1e400 parse to inf and fail here
        computed = digest(canonical_bytes(parsed))
    except (ValueError, TypeError, RecursionError):
        return result(VerifyStatus.INVALID_JSON, "OTMS JSON is not valid JSON.")
    doc_treasury = None
    if isinstance(parsed, dict) and parsed.get("treasury") is not None:
        doc_treasury = str(parsed["treasury"]).strip() or None

    phase = VerifyPhase.FETCHING
    try:
        tx = ledger.get_transaction(sig)
    except OTMSException as e:
        return result(VerifyStatus.NETWORK_ERROR, e.message, computed_hash=computed)
    except Exception as e:
        return result(VerifyStatus.NETWORK_ERROR, str(e) or "Verification failed unexpectedly.", computed_hash=computed)
    if not tx:
        return result(
            VerifyStatus.TRANSACTION_NOT_FOUND,
            "Could not fetch that transaction (wrong cluster or signature?).",
            computed_hash=computed,
        )

    phase = VerifyPhase.DECODING
    ix = find_memo_instruction(tx)
    if ix is None:
        return result(VerifyStatus.NO_MEMO_INSTRUCTION, "No Memo instruction found in this transaction.", computed_hash=computed)

    memo_text = extract_memo_text(ix)
    if memo_text is None:
        return result(VerifyStatus.UNREADABLE_MEMO, "Memo instruction found, but no readable memo text.", computed_hash=computed)

    try:
        memo = decode(memo_text)
    except MissingHashLine as e:
        return result(VerifyStatus.MISSING_HASH_LINE, str(e), computed_hash=computed, memo_text=memo_text)

    phase = VerifyPhase.COMPARING
    common = dict(
        computed_hash=computed,
        memo_hash=memo.digest_hex,
        memo_text=memo_text,
        document_treasury=doc_treasury,
        memo_treasury=memo.treasury or None,
    )
    if memo.digest_hex.lower() != computed:
        return result(
            VerifyStatus.HASH_MISMATCH,
            f"Not verified.\nComputed hash: {computed}\nMemo hash: {memo.digest_hex}",
            **common,
        )

    if doc_treasury and memo.treasury and doc_treasury != memo.treasury:
        return result(
            VerifyStatus.TREASURY_MISMATCH,
            f"Hash verified but treasury mismatch:\nJSON treasury: {doc_treasury}\nMemo treasury: {memo.treasury}",
            hash_matched=True,
            **common,
        )

    return result(VerifyStatus.VERIFIED, "Verified! Hash matches Memo.", hash_matched=True, **common)


def verify_document(transaction_id: str, document: Any, ledger: LedgerQueryPort) -> VerifyResult:
    """Verify an already-parsed document; formatting never affects the digest."""
    text = "" if document is None else json.dumps(document, ensure_ascii=False)
    return verify(transaction_id, text, ledger)
