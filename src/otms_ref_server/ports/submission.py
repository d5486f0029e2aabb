from __future__ import annotations

from typing import Protocol

from otms_ref_server.models import AnchorPoint


class SubmissionPort(Protocol):
    def submit(self, wire: bytes) -> str:
        """Send a signed, serialized transaction; return its transaction id."""
        ...

    def await_confirmation(self, transaction_id: str, anchor_point: AnchorPoint) -> bool:
        """Block until confirmed (True) or failed/expired (False)."""
        ...
