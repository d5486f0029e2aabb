from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

LAMPORTS_PER_SOL = 1_000_000_000


class SignatureInfo(BaseModel):
    signature: str
    slot: int
    block_time: Optional[int] = None
    err: Optional[str] = None


class AnchorPoint(BaseModel):
    anchor_id: str                   # recent blockhash (base58)
    expiry_height: int               # last valid block height


class AccountSnapshot(BaseModel):
    treasury: str
    balance_lamports: int
    transactions: List[SignatureInfo] = Field(default_factory=list)
    generation: int

    @computed_field
    @property
    def balance_sol(self) -> float:
        return self.balance_lamports / LAMPORTS_PER_SOL


class Instruction(BaseModel):
    program_id: str
    keys: List[str] = Field(default_factory=list)
    data: bytes = b""


class MemoTransaction(BaseModel):
    """Unsigned transaction handed to a signing provider."""

    fee_payer: str
    recent_blockhash: str
    instructions: List[Instruction]


class SignedTransaction(BaseModel):
    signature: str                   # base58, doubles as the transaction id
    wire: bytes                      # serialized transaction ready for submission


class SignerCapability(str, Enum):
    SIGN_AND_SUBMIT = "sign_and_submit"
    SIGN_ONLY = "sign_only"
