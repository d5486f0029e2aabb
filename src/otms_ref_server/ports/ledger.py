# src/otms_ref_server/ports/ledger.py
"""
LedgerQueryPort: read access to the ledger node.

Adapters raise ``otms_ref_server.errors.NetworkError`` for transport/RPC
failures; "not found" is a normal return value (``None``), not an error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from otms_ref_server.models import AnchorPoint, SignatureInfo


class LedgerQueryPort(Protocol):
    def get_balance(self, account: str) -> int:
        ...

    def get_recent_signatures(self, account: str, limit: int) -> List[SignatureInfo]:
        ...

    def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        """Transaction with fully decoded (jsonParsed) instructions, or None."""
        ...

    def get_recent_anchor_point(self) -> AnchorPoint:
        ...
