from __future__ import annotations

from enum import Enum
from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---- protocol constants ----
OTMS_VERSION: int = 1
OTMS_STANDARD: str = "OTMS"
PROTOCOL_NAME: str = "OpenTreasury"
MEMO_PROGRAM_ID: str = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"


class AnnotationLabel(str, Enum):
    DONATION = "Donation"
    GRANT = "Grant"
    OPS = "Ops"
    MILESTONE = "Milestone"
    OTHER = "Other"


def is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class Annotation(BaseModel):
    """
    User-entered categorization of one ledger transaction.

    ``custom_category`` is only meaningful for ``Other``; it is packed into the
    legacy ``"Other: X | Y"`` string at the export boundary and nowhere else.
    """

    label: AnnotationLabel
    description: Optional[str] = None
    custom_category: Optional[str] = Field(default=None, alias="customCategory")
    proof_url: Optional[str] = Field(default=None, alias="proofUrl")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("description", "custom_category", "proof_url")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("proof_url")
    @classmethod
    def _http_only(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_http_url(v):
            raise ValueError("Supporting link must be a valid http(s) URL")
        return v

    @model_validator(mode="after")
    def _custom_category_needs_other(self) -> "Annotation":
        if self.custom_category is not None and self.label is not AnnotationLabel.OTHER:
            raise ValueError("custom category is only allowed for label 'Other'")
        return self


class OTMSEntry(BaseModel):
    signature: str
    category: AnnotationLabel
    description: str = ""
    proof_url: str = Field(default="", alias="proofUrl")

    model_config = ConfigDict(populate_by_name=True)


class OTMSDocument(BaseModel):
    version: int = Field(default=OTMS_VERSION)
    standard: str = Field(default=OTMS_STANDARD)
    cluster: str
    treasury: str
    exported_at: str = Field(..., alias="exportedAt")   # ISO-8601, millisecond precision, "Z"
    entries: List[OTMSEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict with the published camelCase key names."""
        return self.model_dump(by_alias=True, mode="json")
