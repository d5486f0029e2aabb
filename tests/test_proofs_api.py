# tests/test_proofs_api.py
import hashlib

from otms_ref_server.protocol.memo import decode
from tests.conftest import TREASURY, client, connected_signer, memo_tx

BASE = f"/treasuries/{TREASURY}"


def _annotate():
    r = client.put(f"{BASE}/annotations/sig1", json={"label": "Grant", "description": "Round 2"})
    assert r.status_code == 200, r.text


def test_generate_and_get_proof():
    _annotate()
    r = client.post(f"{BASE}/proof")
    assert r.status_code == 201, r.text
    rec = r.json()
    assert rec["treasury"] == TREASURY
    assert rec["digest_hex"] == hashlib.sha256(rec["canonical_json"].encode("utf-8")).hexdigest()
    assert rec["anchor_tx_id"] is None

    g = client.get(f"{BASE}/proof")
    assert g.status_code == 200
    assert g.json()["digest_hex"] == rec["digest_hex"]


def test_proof_goes_stale_when_annotations_change():
    _annotate()
    client.post(f"{BASE}/proof")
    client.put(f"{BASE}/annotations/sig2", json={"label": "Ops"})
    g = client.get(f"{BASE}/proof")
    assert g.status_code == 404
    assert g.json()["error"]["code"] == "not_found"


def test_proof_is_stale_when_store_changes_underneath(fakes):
    _annotate()
    client.post(f"{BASE}/proof")
    items = fakes.store.get(TREASURY)
    items.pop("sig1")
    fakes.store.put(TREASURY, items)
    assert client.get(f"{BASE}/proof").status_code == 404


def test_anchor_without_proof(fakes):
    fakes.signer = connected_signer()
    r = client.post(f"{BASE}/proof/anchor")
    assert r.status_code == 409
    err = r.json()["error"]
    assert err["code"] == "nothing_to_anchor"
    assert err["message"] == "Generate proof first (hash is empty)."


def test_missing_signer_is_reported_before_missing_proof():
    r = client.post(f"{BASE}/proof/anchor")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "no_signer"


def test_anchor_without_signer():
    _annotate()
    client.post(f"{BASE}/proof")
    r = client.post(f"{BASE}/proof/anchor")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "no_signer"


def test_anchor_refused_in_read_only_view(fakes):
    fakes.signer = connected_signer()
    _annotate()
    client.post(f"{BASE}/proof")
    r = client.post(f"{BASE}/proof/anchor", params={"view": "public"})
    assert r.status_code == 403
    assert fakes.submission.submitted == []


def test_anchor_not_confirmed_is_502(fakes):
    fakes.signer = connected_signer()
    fakes.submission.confirm = False
    _annotate()
    client.post(f"{BASE}/proof")
    r = client.post(f"{BASE}/proof/anchor")
    assert r.status_code == 502
    assert r.json()["error"]["code"] == "not_confirmed"


def test_anchor_then_verify(fakes):
    fakes.signer = connected_signer()
    _annotate()
    rec = client.post(f"{BASE}/proof").json()

    a = client.post(f"{BASE}/proof/anchor")
    assert a.status_code == 200, a.text
    receipt = a.json()
    assert receipt["digest_hex"] == rec["digest_hex"]
    assert receipt["explorer_url"].startswith(f"https://explorer.solana.com/tx/{receipt['transaction_id']}")
    assert decode(receipt["memo_text"]).treasury == TREASURY
    assert client.get(f"{BASE}/proof").json()["anchor_tx_id"] == receipt["transaction_id"]

    fakes.ledger.transactions[receipt["transaction_id"]] = memo_tx(receipt["memo_text"])
    v = client.post("/proofs/verify", json={
        "transaction_id": receipt["transaction_id"],
        "document_json": rec["canonical_json"],
    })
    assert v.status_code == 200
    result = v.json()
    assert result["status"] == "verified"
    assert result["severity"] == "ok"
    assert result["hash_matched"] is True


def test_verify_reports_outcomes_not_errors(fakes):
    fakes.ledger.transactions["tx1"] = memo_tx("OpenTreasury Proof (OTMS v1)\nTreasury: T1\nHash: " + "0" * 64)
    v = client.post("/proofs/verify", json={"transaction_id": "tx1", "document": {"treasury": "T1", "entries": []}})
    assert v.status_code == 200
    body = v.json()
    assert body["status"] == "hash_mismatch"
    assert body["severity"] == "error"
    assert body["memo_hash"] == "0" * 64

    m = client.post("/proofs/verify", json={"transaction_id": "tx1"})
    assert m.status_code == 200
    assert m.json()["status"] == "missing_input"
