# src/otms_ref_server/ports/signing.py
"""
SigningProvider: wallet / key custody.

A provider exposes exactly one of two capabilities and says which through
``capability``; callers branch on that value:
  - SIGN_AND_SUBMIT -> ``sign_and_submit(tx)`` returns the transaction id
  - SIGN_ONLY       -> ``sign(tx)`` returns a SignedTransaction for the
                       SubmissionPort to send
"""

from __future__ import annotations

from typing import Optional, Protocol

from otms_ref_server.models import MemoTransaction, SignedTransaction, SignerCapability


class SigningProvider(Protocol):
    capability: SignerCapability

    @property
    def identity(self) -> Optional[str]:
        """Base58 public key once connected, else None."""
        ...

    def connect(self) -> str:
        ...

    def sign_and_submit(self, tx: MemoTransaction) -> str:
        ...

    def sign(self, tx: MemoTransaction) -> SignedTransaction:
        ...
