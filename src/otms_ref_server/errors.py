# src/otms_ref_server/errors.py
"""
Error taxonomy shared by services and the HTTP layer.

Each exception carries a stable machine-readable ``code`` and the HTTP status
the API answers with. Verification verdicts are NOT exceptions; they travel as
``VerifyResult`` values (see models/proof.py).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class OTMSException(Exception):
    code: str = "error"
    status: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(OTMSException, ValueError):
    """Bad user input (URL, empty required field, unknown label) -> 400."""
    code = "validation_error"
    status = 400


class ParseError(OTMSException, ValueError):
    """Malformed JSON on import/verify -> 400."""
    code = "parse_error"
    status = 400


class NetworkError(OTMSException):
    """Ledger query / submission / wallet failure -> 502. Never retried automatically."""
    code = "network_error"
    status = 502


class AnchorError(OTMSException):
    code = "anchor_error"
    status = 409


class NoSigner(AnchorError):
    code = "no_signer"


class NothingToAnchor(AnchorError):
    code = "nothing_to_anchor"


class NotConfirmed(AnchorError):
    code = "not_confirmed"
    status = 502


class ReadOnlyViewError(OTMSException):
    code = "read_only_view"
    status = 403


class Superseded(OTMSException):
    """A newer load of the same account started before this one finished."""
    code = "superseded"
    status = 409
