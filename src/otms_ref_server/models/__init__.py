from .otms import (
    Annotation,
    AnnotationLabel,
    OTMSDocument,
    OTMSEntry,
    OTMS_STANDARD,
    OTMS_VERSION,
    MEMO_PROGRAM_ID,
    PROTOCOL_NAME,
)
from .proof import (
    AnchorMemo,
    AnchorReceipt,
    ProofRecord,
    Severity,
    VerifyPhase,
    VerifyResult,
    VerifyStatus,
    ViewMode,
)
from .ledger import (
    AccountSnapshot,
    AnchorPoint,
    Instruction,
    LAMPORTS_PER_SOL,
    MemoTransaction,
    SignatureInfo,
    SignedTransaction,
    SignerCapability,
)

__all__ = [
    "Annotation",
    "AnnotationLabel",
    "OTMSDocument",
    "OTMSEntry",
    "OTMS_STANDARD",
    "OTMS_VERSION",
    "MEMO_PROGRAM_ID",
    "PROTOCOL_NAME",
    "AnchorMemo",
    "AnchorReceipt",
    "ProofRecord",
    "Severity",
    "VerifyPhase",
    "VerifyResult",
    "VerifyStatus",
    "ViewMode",
    "AccountSnapshot",
    "AnchorPoint",
    "Instruction",
    "LAMPORTS_PER_SOL",
    "MemoTransaction",
    "SignatureInfo",
    "SignedTransaction",
    "SignerCapability",
]
