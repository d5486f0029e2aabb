# src/otms_ref_server/services/anchor.py
"""
Anchor Writer: put a proof digest on the ledger inside a memo instruction.

This is the only operation that costs a fee and leaves a permanent public
record. It runs once per explicit request and is never retried here; a second
call produces a second, visible anchor.

Steps run strictly in order (a stale blockhash invalidates the transaction):
    anchor point -> sign (-> submit) -> await confirmation
"""

from __future__ import annotations

from typing import Optional

from otms_ref_server.config import settings
from otms_ref_server.errors import NetworkError, NoSigner, NotConfirmed, NothingToAnchor, OTMSException
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import (
    AnchorReceipt,
    Instruction,
    MEMO_PROGRAM_ID,
    MemoTransaction,
    SignerCapability,
)
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.ports.signing import SigningProvider
from otms_ref_server.ports.submission import SubmissionPort
from otms_ref_server.protocol import memo
from otms_ref_server.protocol.document import utc_iso

log = get_logger(__name__)


def build_memo_transaction(fee_payer: str, recent_blockhash: str, memo_text: str) -> MemoTransaction:
    return MemoTransaction(
        fee_payer=fee_payer,
        recent_blockhash=recent_blockhash,
        instructions=[Instruction(program_id=MEMO_PROGRAM_ID, keys=[], data=memo_text.encode("utf-8"))],
    )


def anchor(
    treasury: str,
    digest_hex: str,
    signer: Optional[SigningProvider],
    submission: SubmissionPort,
    ledger: LedgerQueryPort,
    *,
    timestamp_iso: Optional[str] = None,
    cluster: str = settings.CLUSTER,
) -> AnchorReceipt:
    if signer is None or not signer.identity:
        raise NoSigner("Connect your wallet first.")
    if not digest_hex:
        raise NothingToAnchor("Generate proof first (hash is empty).")

    memo_text = memo.encode(treasury.strip(), digest_hex, timestamp_iso or utc_iso())

    try:
        point = ledger.get_recent_anchor_point()
        tx = build_memo_transaction(signer.identity, point.anchor_id, memo_text)

        if signer.capability is SignerCapability.SIGN_AND_SUBMIT:
            tx_id = signer.sign_and_submit(tx)
        else:
            signed = signer.sign(tx)
            tx_id = submission.submit(signed.wire)
        if not tx_id:
            raise NetworkError("Signer returned no transaction id.")
        log.info("anchor submitted: %s (blockhash %s)", tx_id, point.anchor_id)

        confirmed = submission.await_confirmation(tx_id, point)
    except OTMSException:
        raise
    except Exception as e:
        raise NetworkError(str(e) or "Could not anchor proof on-chain.") from e

    if not confirmed:
        raise NotConfirmed(
            "Transaction was not confirmed.",
            details={"transaction_id": tx_id},
        )

    log.info("anchor confirmed: %s for %s", tx_id, digest_hex)
    return AnchorReceipt(
        transaction_id=tx_id,
        explorer_url=settings.explorer_tx_url(tx_id, cluster),
        digest_hex=digest_hex,
        memo_text=memo_text,
    )
