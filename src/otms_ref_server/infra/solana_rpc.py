# src/otms_ref_server/infra/solana_rpc.py
"""
Solana JSON-RPC adapter. Implements both LedgerQueryPort and SubmissionPort.

Nothing here retries: a failed call surfaces as NetworkError and the caller
decides whether to try again.
"""

from __future__ import annotations

import base64
import itertools
import json
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from otms_ref_server.errors import NetworkError
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import AnchorPoint, SignatureInfo
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.ports.submission import SubmissionPort

log = get_logger(__name__)

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


class SolanaRpcClient(LedgerQueryPort, SubmissionPort):
    def __init__(
        self,
        url: str,
        commitment: str = "confirmed",
        timeout: float = 10.0,
        confirm_timeout: float = 60.0,
        poll_interval: float = 1.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if commitment not in _COMMITMENT_RANK:
            raise ValueError(f"unknown commitment {commitment!r}")
        self._url = url
        self._commitment = commitment
        self._timeout = timeout
        self._confirm_timeout = confirm_timeout
        self._poll_interval = poll_interval
        self._session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock
        self._ids = itertools.count(1)

    # --- transport ---
    def _call(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            r = self._session.post(self._url, json=payload, timeout=self._timeout)
            r.raise_for_status()
            body = r.json()
        except requests.RequestException as e:
            raise NetworkError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise NetworkError(f"{method} returned a non-JSON response") from e

        err = body.get("error") if isinstance(body, dict) else None
        if err:
            message = err.get("message", "RPC error") if isinstance(err, dict) else str(err)
            raise NetworkError(f"{method}: {message}", details={"rpc_error": err})
        if not isinstance(body, dict) or "result" not in body:
            raise NetworkError(f"{method} returned no result")
        return body["result"]

    # --- LedgerQueryPort ---
    def get_balance(self, account: str) -> int:
        result = self._call("getBalance", [account, {"commitment": self._commitment}])
        return int(result["value"])

    def get_recent_signatures(self, account: str, limit: int) -> List[SignatureInfo]:
        rows = self._call(
            "getSignaturesForAddress",
            [account, {"limit": limit, "commitment": self._commitment}],
        )
        return [
            SignatureInfo(
                signature=row["signature"],
                slot=row["slot"],
                block_time=row.get("blockTime"),
                err=json.dumps(row["err"], sort_keys=True) if row.get("err") is not None else None,
            )
            for row in rows or []
        ]

    def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        return self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": self._commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    def get_recent_anchor_point(self) -> AnchorPoint:
        result = self._call("getLatestBlockhash", [{"commitment": self._commitment}])
        value = result["value"]
        return AnchorPoint(anchor_id=value["blockhash"], expiry_height=int(value["lastValidBlockHeight"]))

    # --- SubmissionPort ---
    def submit(self, wire: bytes) -> str:
        encoded = base64.b64encode(wire).decode("ascii")
        return self._call(
            "sendTransaction",
            [
                encoded,
                {"encoding": "base64", "skipPreflight": False, "preflightCommitment": self._commitment},
            ],
        )

    def _reached(self, status: Optional[str]) -> bool:
        if status is None:
            return False
        return _COMMITMENT_RANK.get(status, -1) >= _COMMITMENT_RANK[self._commitment]

    def await_confirmation(self, transaction_id: str, anchor_point: AnchorPoint) -> bool:
        deadline = self._clock() + self._confirm_timeout
        while True:
            result = self._call("getSignatureStatuses", [[transaction_id]])
            status = (result.get("value") or [None])[0]
            if status:
                if status.get("err") is not None:
                    log.warning("transaction %s failed: %s", transaction_id, status["err"])
                    return False
                if self._reached(status.get("confirmationStatus")):
                    return True

            height = int(self._call("getBlockHeight", [{"commitment": self._commitment}]))
            if height > anchor_point.expiry_height:
                log.warning("blockhash for %s expired at height %d", transaction_id, anchor_point.expiry_height)
                return False
            if self._clock() >= deadline:
                log.warning("gave up waiting for %s after %.0fs", transaction_id, self._confirm_timeout)
                return False
            self._sleep(self._poll_interval)
