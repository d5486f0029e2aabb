import os

from fastapi import APIRouter
from otms_ref_server.config import settings
from otms_ref_server.models import MEMO_PROGRAM_ID, OTMS_STANDARD, OTMS_VERSION, PROTOCOL_NAME
from otms_ref_server.protocol.memo import MEMO_LABEL

router = APIRouter(tags=["system"])


@router.get("/.well-known/otms.json")
def otms_discovery():
    return {
        "protocol": PROTOCOL_NAME,
        "standard": OTMS_STANDARD,
        "version": OTMS_VERSION,
        "memo": {
            "program_id": MEMO_PROGRAM_ID,
            "label": MEMO_LABEL,
            "fields": ["Treasury", "Hash", "Timestamp"],
        },
        "digest": {"algorithm": "sha256", "encoding": "hex"},
        "ledger": {"cluster": settings.CLUSTER, "commitment": settings.COMMITMENT},
        "endpoints": {
            "annotations": "/treasuries/{treasury}/annotations",
            "export": "/treasuries/{treasury}/export",
            "import": "/treasuries/{treasury}/import",
            "proof": "/treasuries/{treasury}/proof",
            "anchor": "/treasuries/{treasury}/proof/anchor",
            "account": "/treasuries/{treasury}/account",
            "verify": "/proofs/verify",
            "health": "/health",
        },
        "view_mode": os.getenv("OTMS_VIEW_MODE", settings.VIEW_MODE),
    }
