# tests/conftest.py
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from otms_ref_server.main import app
from otms_ref_server.infra.memory_annotations import MemoryAnnotationStore
from otms_ref_server.infra.providers import (
    get_account_loader,
    get_annotation_store,
    get_ledger,
    get_proof_registry,
    get_signer,
    get_submission,
)
from otms_ref_server.models import (
    AnchorPoint,
    MEMO_PROGRAM_ID,
    MemoTransaction,
    SignatureInfo,
    SignerCapability,
)
from otms_ref_server.protocol.base58 import b58encode
from otms_ref_server.security.keypair_signer import KeypairSigner
from otms_ref_server.services.account import AccountLoader
from otms_ref_server.services.proofs import ProofRegistry


# ------------------ Constants ------------------

TREASURY = b58encode(bytes(range(1, 33)))
BLOCKHASH = b58encode(bytes(range(100, 132)))
SEED = bytes(range(32))


# ------------------ Helpers ------------------

def memo_tx(memo_text: Optional[str] = None, program_id: str = MEMO_PROGRAM_ID, **ix_fields: Any) -> Dict[str, Any]:
    """A jsonParsed getTransaction result carrying one instruction."""
    ix: Dict[str, Any] = {"programId": program_id, "stackHeight": None}
    if memo_text is not None:
        ix["program"] = "spl-memo"
        ix["parsed"] = memo_text
    ix.update(ix_fields)
    return {
        "slot": 42,
        "blockTime": 1714564800,
        "meta": {"err": None},
        "transaction": {"message": {"instructions": [ix]}, "signatures": ["x"]},
    }


def connected_signer() -> KeypairSigner:
    signer = KeypairSigner.from_seed(SEED)
    signer.connect()
    return signer


# ------------------ Fakes used by tests ------------------

class FakeLedger:
    def __init__(self, calls: Optional[List[str]] = None):
        self.balance = 0
        self.signatures: List[SignatureInfo] = []
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.anchor_point = AnchorPoint(anchor_id=BLOCKHASH, expiry_height=1_000)
        self.fail: Optional[Exception] = None
        self.calls = calls if calls is not None else []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail is not None:
            raise self.fail

    def get_balance(self, account: str) -> int:
        self._record("get_balance")
        return self.balance

    def get_recent_signatures(self, account: str, limit: int) -> List[SignatureInfo]:
        self._record("get_recent_signatures")
        return self.signatures[:limit]

    def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        self._record("get_transaction")
        return self.transactions.get(signature)

    def get_recent_anchor_point(self) -> AnchorPoint:
        self._record("get_recent_anchor_point")
        return self.anchor_point


class FakeSubmission:
    def __init__(self, calls: Optional[List[str]] = None):
        self.confirm = True
        self.submitted: List[bytes] = []
        self.awaited: List[str] = []
        self.calls = calls if calls is not None else []

    def submit(self, wire: bytes) -> str:
        self.calls.append("submit")
        self.submitted.append(wire)
        # the first signature of a legacy transaction is its id
        return b58encode(wire[1:65])

    def await_confirmation(self, transaction_id: str, anchor_point: AnchorPoint) -> bool:
        self.calls.append("await_confirmation")
        self.awaited.append(transaction_id)
        return self.confirm


class FakeWallet:
    """Wallet-style provider that signs and submits in one step."""

    capability = SignerCapability.SIGN_AND_SUBMIT

    def __init__(self, identity: str = TREASURY, tx_id: str = "walletTx1", calls: Optional[List[str]] = None):
        self._identity = identity
        self.tx_id = tx_id
        self.sent: List[MemoTransaction] = []
        self.calls = calls if calls is not None else []

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    def connect(self) -> str:
        return self._identity

    def sign_and_submit(self, tx: MemoTransaction) -> str:
        self.calls.append("sign_and_submit")
        self.sent.append(tx)
        return self.tx_id

    def sign(self, tx: MemoTransaction):
        raise AssertionError("wallet does not expose sign()")


class Fakes:
    def __init__(self):
        self.store = MemoryAnnotationStore()
        self.registry = ProofRegistry()
        self.ledger = FakeLedger()
        self.submission = FakeSubmission()
        self.signer: Optional[Any] = None
        self.loaders: Dict[str, AccountLoader] = {}

    def loader(self, treasury: str) -> AccountLoader:
        return self.loaders.setdefault(treasury.strip(), AccountLoader(limit=10))


# ------------------ Per-test wiring ------------------

@pytest.fixture(autouse=True)
def fakes(monkeypatch):
    """
    Give each test fresh adapters by overriding the app dependencies.
    """
    monkeypatch.delenv("OTMS_VIEW_MODE", raising=False)
    f = Fakes()

    def _loader(treasury: str) -> AccountLoader:
        return f.loader(treasury)

    app.dependency_overrides[get_annotation_store] = lambda: f.store
    app.dependency_overrides[get_proof_registry] = lambda: f.registry
    app.dependency_overrides[get_ledger] = lambda: f.ledger
    app.dependency_overrides[get_submission] = lambda: f.submission
    app.dependency_overrides[get_signer] = lambda: f.signer
    app.dependency_overrides[get_account_loader] = _loader
    try:
        yield f
    finally:
        app.dependency_overrides.clear()


# IMPORTANT:
# Tests do `from tests.conftest import client` and call client.post(...)
# So we expose a module-level TestClient named `client` (NOT a fixture).
client = TestClient(app)
