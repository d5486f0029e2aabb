# src/otms_ref_server/security/keypair_signer.py
from __future__ import annotations

from typing import Optional

from nacl.signing import SigningKey

from otms_ref_server.errors import NetworkError
from otms_ref_server.infra.solana_tx import compile_message, serialize_transaction
from otms_ref_server.models import MemoTransaction, SignedTransaction, SignerCapability
from otms_ref_server.ports.signing import SigningProvider
from otms_ref_server.protocol.base58 import b58encode


class KeypairSigner(SigningProvider):
    """
    Server-held Ed25519 key. Signs only; the SubmissionPort sends the result.
    """

    capability = SignerCapability.SIGN_ONLY

    def __init__(self, signing_key: SigningKey) -> None:
        self._sk = signing_key
        self._identity: Optional[str] = None

    @classmethod
    def from_seed(cls, seed: bytes) -> "KeypairSigner":
        return cls(SigningKey(seed))

    @property
    def public_key(self) -> str:
        return b58encode(bytes(self._sk.verify_key))

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    def connect(self) -> str:
        self._identity = self.public_key
        return self._identity

    def sign(self, tx: MemoTransaction) -> SignedTransaction:
        if self._identity is None:
            raise PermissionError("signer is not connected")
        if tx.fee_payer != self._identity:
            raise ValueError("fee payer does not match the signing key")
        message = compile_message(tx)
        sig = self._sk.sign(message).signature
        return SignedTransaction(signature=b58encode(sig), wire=serialize_transaction([sig], message))

    def sign_and_submit(self, tx: MemoTransaction) -> str:
        raise NetworkError("KeypairSigner only signs; submit through the SubmissionPort")
