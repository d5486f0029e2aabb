from __future__ import annotations

import base64
import binascii
import os
from typing import Optional

from otms_ref_server.config import settings
from otms_ref_server.logging_setup import get_logger

log = get_logger(__name__)


def b64url_decode(s: str) -> bytes:
    s = s.strip().replace(" ", "")
    pad = "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)


def load_signer_seed() -> Optional[bytes]:
    """
    Resolve the server-side Ed25519 seed.
    Source: OTMS_SIGNER_SEED = base64url of 32 raw bytes.
    Returns None when unset or unusable (anchoring then fails with NoSigner).
    """
    raw = os.getenv("OTMS_SIGNER_SEED", settings.SIGNER_SEED)
    if not raw:
        return None
    try:
        seed = b64url_decode(raw)
    except (binascii.Error, ValueError):
        log.warning("OTMS_SIGNER_SEED is not valid base64url; signer disabled")
        return None
    if len(seed) != 32:
        log.warning("OTMS_SIGNER_SEED must decode to 32 bytes (got %d); signer disabled", len(seed))
        return None
    return seed
