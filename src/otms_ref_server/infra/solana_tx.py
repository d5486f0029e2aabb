# src/otms_ref_server/infra/solana_tx.py
"""
Legacy (pre-versioned) Solana transaction wire format, restricted to what an
anchor needs: one fee payer that signs, and instructions without accounts.

    transaction = compact_u16(n_sigs) || sig[64] * n_sigs || message
    message     = header[3] || compact_u16(n_keys) || key[32] * n_keys
                  || blockhash[32] || compact_u16(n_ix) || instruction *
    instruction = program_index[u8] || compact_u16(0) || compact_u16(len) || data
"""

from __future__ import annotations

from typing import List

from otms_ref_server.models import MemoTransaction
from otms_ref_server.protocol.base58 import b58decode

PACKET_DATA_SIZE = 1232


def encode_length(n: int) -> bytes:
    """compact-u16: 7 bits per byte, little end first, high bit = continue."""
    if n < 0 or n > 0xFFFF:
        raise ValueError("length out of range for compact-u16")
    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _key(value: str, what: str) -> bytes:
    raw = b58decode(value)
    if len(raw) != 32:
        raise ValueError(f"{what} must decode to 32 bytes")
    return raw


def compile_message(tx: MemoTransaction) -> bytes:
    programs: List[str] = []
    for ix in tx.instructions:
        if ix.keys:
            raise ValueError("only account-free instructions are supported")
        if ix.program_id != tx.fee_payer and ix.program_id not in programs:
            programs.append(ix.program_id)
    account_keys = [tx.fee_payer] + programs

    # 1 required signature (fee payer), 0 readonly signed, programs readonly unsigned
    out = bytearray([1, 0, len(programs)])
    out += encode_length(len(account_keys))
    for k in account_keys:
        out += _key(k, "account key")
    out += _key(tx.recent_blockhash, "recent blockhash")
    out += encode_length(len(tx.instructions))
    for ix in tx.instructions:
        out.append(account_keys.index(ix.program_id))
        out += encode_length(0)
        out += encode_length(len(ix.data))
        out += ix.data
    return bytes(out)


def serialize_transaction(signatures: List[bytes], message: bytes) -> bytes:
    for sig in signatures:
        if len(sig) != 64:
            raise ValueError("signatures must be 64 bytes")
    wire = encode_length(len(signatures)) + b"".join(signatures) + message
    if len(wire) > PACKET_DATA_SIZE:
        raise ValueError(f"transaction is {len(wire)} bytes; limit is {PACKET_DATA_SIZE}")
    return wire
