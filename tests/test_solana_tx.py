# tests/test_solana_tx.py
import pytest

from otms_ref_server.infra.solana_tx import (
    PACKET_DATA_SIZE,
    compile_message,
    encode_length,
    serialize_transaction,
)
from otms_ref_server.models import Instruction, MEMO_PROGRAM_ID
from otms_ref_server.protocol.base58 import b58decode
from otms_ref_server.services.anchor import build_memo_transaction
from tests.conftest import BLOCKHASH, TREASURY


@pytest.mark.parametrize(
    "n, encoded",
    [
        (0, b"\x00"),
        (127, b"\x7f"),
        (128, b"\x80\x01"),
        (16383, b"\xff\x7f"),
        (16384, b"\x80\x80\x01"),
    ],
)
def test_encode_length(n, encoded):
    assert encode_length(n) == encoded


def test_encode_length_out_of_range():
    with pytest.raises(ValueError):
        encode_length(0x10000)


def test_compile_memo_message_layout():
    msg = compile_message(build_memo_transaction(TREASURY, BLOCKHASH, "hi"))
    assert msg[:3] == bytes([1, 0, 1])
    assert msg[3] == 2
    assert msg[4:36] == b58decode(TREASURY)
    assert msg[36:68] == b58decode(MEMO_PROGRAM_ID)
    assert msg[68:100] == b58decode(BLOCKHASH)
    # one instruction: program index 1, no accounts, 2 bytes of data
    assert msg[100:] == bytes([1, 1, 0, 2]) + b"hi"


def test_instructions_with_accounts_are_rejected():
    tx = build_memo_transaction(TREASURY, BLOCKHASH, "hi")
    tx.instructions.append(Instruction(program_id=MEMO_PROGRAM_ID, keys=[TREASURY], data=b"x"))
    with pytest.raises(ValueError):
        compile_message(tx)


def test_bad_blockhash_is_rejected():
    with pytest.raises(ValueError):
        compile_message(build_memo_transaction(TREASURY, "short", "hi"))


def test_serialize_prefixes_signatures():
    msg = compile_message(build_memo_transaction(TREASURY, BLOCKHASH, "hi"))
    wire = serialize_transaction([b"\x01" * 64], msg)
    assert wire[0] == 1
    assert wire[1:65] == b"\x01" * 64
    assert wire[65:] == msg


def test_serialize_enforces_packet_size():
    msg = compile_message(build_memo_transaction(TREASURY, BLOCKHASH, "x" * PACKET_DATA_SIZE))
    with pytest.raises(ValueError):
        serialize_transaction([b"\x01" * 64], msg)


def test_serialize_rejects_short_signature():
    with pytest.raises(ValueError):
        serialize_transaction([b"\x01" * 10], b"")
