# tests/test_memo.py
import pytest

from otms_ref_server.protocol.memo import MEMO_LABEL, MissingHashLine, decode, encode

HASH = "ab" * 32
TS = "2024-05-01T12:00:00.000Z"


def test_encode_layout():
    text = encode("T1", HASH, TS)
    assert text == f"OpenTreasury Proof (OTMS v1)\nTreasury: T1\nHash: {HASH}\nTimestamp: {TS}"
    assert MEMO_LABEL == "OpenTreasury Proof (OTMS v1)"


@pytest.mark.parametrize("treasury", ["T1", "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T", "a b c"])
def test_decode_reads_back_encoded_fields(treasury):
    memo = decode(encode(treasury, HASH, TS))
    assert memo.treasury == treasury
    assert memo.digest_hex == HASH
    assert memo.timestamp_iso == TS
    assert memo.label == MEMO_LABEL


def test_decode_is_case_insensitive_and_order_free():
    text = f"  timestamp: {TS}\nextra line\nHASH: {HASH}  \r\ntreasury:T9\n"
    memo = decode(text)
    assert memo.digest_hex == HASH
    assert memo.treasury == "T9"
    assert memo.timestamp_iso == TS
    assert memo.label == "extra line"


def test_decode_without_optional_fields():
    memo = decode(f"Hash: {HASH}")
    assert memo.digest_hex == HASH
    assert memo.treasury == ""
    assert memo.timestamp_iso == ""


@pytest.mark.parametrize("text", ["OpenTreasury Proof (OTMS v1)\nTreasury: T1", "Hash:   ", ""])
def test_decode_requires_hash_line(text):
    with pytest.raises(MissingHashLine) as exc:
        decode(text)
    assert str(exc.value) == "Memo found but could not read Hash line."
