# src/otms_ref_server/services/account.py
"""
Balance + history loading for a tracked account.

Each load takes a generation number when it starts. When it finishes, its
result is kept only if no newer load has started since; otherwise it is
dropped so a slow, superseded fetch never overwrites newer state.
"""

from __future__ import annotations

import threading
from typing import Optional

from otms_ref_server.config import settings
from otms_ref_server.errors import NetworkError, OTMSException, ValidationError
from otms_ref_server.logging_setup import get_logger
from otms_ref_server.models import AccountSnapshot
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.protocol.base58 import is_public_key

log = get_logger(__name__)


class AccountLoader:
    def __init__(self, limit: int = settings.HISTORY_LIMIT) -> None:
        self._limit = limit
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot: Optional[AccountSnapshot] = None

    @property
    def snapshot(self) -> Optional[AccountSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def load(self, treasury: str, ledger: LedgerQueryPort) -> Optional[AccountSnapshot]:
        """
        Fetch balance and recent signatures. Returns None when a newer load
        started while this one was in flight.
        """
        treasury = (treasury or "").strip()
        if not is_public_key(treasury):
            raise ValidationError(f"Invalid treasury address: {treasury!r}")

        generation = self.begin()
        try:
            balance = ledger.get_balance(treasury)
            if not self._is_current(generation):
                log.debug("load %d for %s superseded after balance", generation, treasury)
                return None
            history = ledger.get_recent_signatures(treasury, self._limit)
        except OTMSException:
            raise
        except Exception as e:
            raise NetworkError(str(e) or "Something went wrong") from e

        snapshot = AccountSnapshot(
            treasury=treasury,
            balance_lamports=balance,
            transactions=history,
            generation=generation,
        )
        with self._lock:
            if generation != self._generation:
                log.debug("load %d for %s superseded; dropped", generation, treasury)
                return None
            self._snapshot = snapshot
        return snapshot
