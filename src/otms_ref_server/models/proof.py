from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


class ViewMode(str, Enum):
    INTERACTIVE = "interactive"
    READ_ONLY = "read-only"


class ProofRecord(BaseModel):
    """Derived, never persisted. Dropped whenever the annotation set changes."""

    treasury: str
    canonical_json: str
    digest_hex: str
    fingerprint: str = Field(..., description="Digest of the annotation set the record was built from")
    anchor_tx_id: Optional[str] = None


class AnchorMemo(BaseModel):
    label: str = ""
    treasury: str = ""
    digest_hex: str
    timestamp_iso: str = ""


class AnchorReceipt(BaseModel):
    transaction_id: str
    explorer_url: str
    digest_hex: str
    memo_text: str


class VerifyStatus(str, Enum):
    VERIFIED = "verified"
    TREASURY_MISMATCH = "treasury_mismatch"
    HASH_MISMATCH = "hash_mismatch"
    MISSING_INPUT = "missing_input"
    INVALID_JSON = "invalid_json"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    NO_MEMO_INSTRUCTION = "no_memo_instruction"
    UNREADABLE_MEMO = "unreadable_memo"
    MISSING_HASH_LINE = "missing_hash_line"
    NETWORK_ERROR = "network_error"


class VerifyPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    DECODING = "decoding"
    COMPARING = "comparing"


class Severity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class VerifyResult(BaseModel):
    status: VerifyStatus
    phase: VerifyPhase = Field(..., description="Phase in which the verdict was reached")
    message: str
    hash_matched: bool = False
    computed_hash: Optional[str] = None
    memo_hash: Optional[str] = None
    memo_text: Optional[str] = None
    document_treasury: Optional[str] = None
    memo_treasury: Optional[str] = None

    @computed_field
    @property
    def severity(self) -> Severity:
        if self.status is VerifyStatus.VERIFIED:
            return Severity.OK
        if self.status is VerifyStatus.TREASURY_MISMATCH:
            return Severity.WARNING
        return Severity.ERROR
