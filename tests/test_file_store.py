# tests/test_file_store.py
import json

from otms_ref_server.infra.file_annotations import FileAnnotationStore, storage_key
from otms_ref_server.infra.memory_annotations import MemoryAnnotationStore
from otms_ref_server.models import Annotation, AnnotationLabel


def test_file_store_roundtrip_and_key_layout(tmp_path):
    path = tmp_path / "data" / "annotations.json"
    store = FileAnnotationStore(path)
    assert store.get("T1") == {}

    items = {"sig1": Annotation(label=AnnotationLabel.OTHER, custom_category="Audit", proof_url="https://x.io")}
    store.put("T1", items)
    store.put("T2", {})

    assert FileAnnotationStore(path).get("T1") == items
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert storage_key("T1") == "opentreasury:labels:T1"
    assert raw["opentreasury:labels:T1"] == {
        "sig1": {"label": "Other", "customCategory": "Audit", "proofUrl": "https://x.io"}
    }
    assert raw["opentreasury:labels:T2"] == {}
    assert not list(path.parent.glob(".annotations-*"))


def test_memory_store_returns_copies():
    store = MemoryAnnotationStore()
    store.put("T1", {"sig1": Annotation(label=AnnotationLabel.OPS)})
    got = store.get("T1")
    got.pop("sig1")
    assert "sig1" in store.get("T1")
