# tests/test_errors.py
from tests.conftest import TREASURY, client


def test_error_shape_on_get_missing_404():
    r = client.get(f"/treasuries/{TREASURY}/annotations/does-not-exist")
    assert r.status_code == 404
    data = r.json()
    assert "error" in data
    err = data["error"]
    assert err["code"] == "not_found"
    assert err["status"] == 404
    assert isinstance(err["message"], str) and err["message"]


def test_error_shape_on_validation_error_becomes_400():
    # missing required 'label' should be a validation error -> normalized to 400
    r = client.put(f"/treasuries/{TREASURY}/annotations/sig1", json={"description": "x"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["status"] == 400
    assert err["message"] == "Invalid request"
    assert "errors" in err.get("details", {})


def test_error_shape_on_domain_error():
    r = client.put(f"/treasuries/{TREASURY}/annotations/sig1", json={"label": "Ops", "customCategory": "X"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "validation_error"
    assert err["status"] == 400
    assert err["details"]["errors"]


def test_health_and_discovery():
    h = client.get("/health")
    assert h.status_code == 200
    assert h.json()["status"] == "ok"

    d = client.get("/.well-known/otms.json")
    assert d.status_code == 200
    data = d.json()
    assert data["standard"] == "OTMS"
    assert data["version"] == 1
    assert data["memo"]["program_id"] == "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"
    assert data["memo"]["label"] == "OpenTreasury Proof (OTMS v1)"
