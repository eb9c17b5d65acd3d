"""
Nonce ledger: the record of consumed claim nonces.

A nonce is consumed the moment a verified claim reserves it, before any
transfer is attempted, and it is never removed automatically. Reservation is
an atomic check-and-insert so that two concurrent submissions of the same
claim produce exactly one winner.

Entries move through the following states:

    RESERVED -> PENDING -> CONFIRMED
    RESERVED -> PENDING -> FAILED

``RESERVED`` may also move straight to ``FAILED`` when the transfer fails
before a transaction is broadcast.
"""

import threading
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from .exceptions import InvalidTransition


class NonceStatus(str, Enum):
    RESERVED = "reserved"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


_TRANSITIONS = {
    NonceStatus.RESERVED: {NonceStatus.PENDING, NonceStatus.FAILED},
    NonceStatus.PENDING: {NonceStatus.CONFIRMED, NonceStatus.FAILED},
    NonceStatus.CONFIRMED: set(),
    NonceStatus.FAILED: set(),
}


class NonceRecord(BaseModel):
    """Ledger entry for one consumed nonce."""
    nonce: str = Field(..., description="Ledger key (string form of the claim nonce)")
    status: NonceStatus = Field(default=NonceStatus.RESERVED)
    tx_hash: Optional[str] = Field(default=None, description="Transfer transaction hash, once known")
    error: Optional[str] = Field(default=None, description="Failure message for FAILED entries")
    reserved_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)


class NonceLedger(ABC):
    """
    Abstract nonce store.

    Implementations must make ``try_reserve`` atomic: under any interleaving
    of concurrent callers, at most one call per nonce returns ``True``.
    """

    @abstractmethod
    def try_reserve(self, nonce: str) -> bool:
        """Insert ``nonce`` as RESERVED. Returns ``False`` if it was already present."""
        pass

    @abstractmethod
    def contains(self, nonce: str) -> bool:
        pass

    @abstractmethod
    def get(self, nonce: str) -> Optional[NonceRecord]:
        pass

    @abstractmethod
    def mark_pending(self, nonce: str) -> NonceRecord:
        pass

    @abstractmethod
    def mark_confirmed(self, nonce: str, tx_hash: str) -> NonceRecord:
        pass

    @abstractmethod
    def mark_failed(self, nonce: str, error: str, tx_hash: Optional[str] = None) -> NonceRecord:
        pass

    @abstractmethod
    def release(self, nonce: str) -> bool:
        """
        Remove a FAILED entry that never produced a transaction hash.

        This is an operator action and is never called by the claim flow.

        Returns:
            ``True`` if the entry was removed, ``False`` if it did not exist.

        Raises:
            InvalidTransition: If the entry is not FAILED or has a tx hash.
        """
        pass


class InMemoryNonceLedger(NonceLedger):
    """
    Process-local ledger backed by a dict and a ``threading.Lock``.

    The lock makes every operation atomic for both coroutines on the event
    loop and worker threads. State is lost when the process exits.

    Example:
        ledger = InMemoryNonceLedger()
        if ledger.try_reserve("42"):
            ledger.mark_pending("42")
            ledger.mark_confirmed("42", "0xabc...")
    """

    def __init__(self) -> None:
        self._entries: Dict[str, NonceRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def try_reserve(self, nonce: str) -> bool:
        key = str(nonce)
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = NonceRecord(nonce=key)
            return True

    def contains(self, nonce: str) -> bool:
        with self._lock:
            return str(nonce) in self._entries

    def get(self, nonce: str) -> Optional[NonceRecord]:
        with self._lock:
            record = self._entries.get(str(nonce))
            return record.model_copy() if record is not None else None

    def mark_pending(self, nonce: str) -> NonceRecord:
        return self._transition(nonce, NonceStatus.PENDING)

    def mark_confirmed(self, nonce: str, tx_hash: str) -> NonceRecord:
        return self._transition(nonce, NonceStatus.CONFIRMED, tx_hash=tx_hash)

    def mark_failed(self, nonce: str, error: str, tx_hash: Optional[str] = None) -> NonceRecord:
        return self._transition(nonce, NonceStatus.FAILED, tx_hash=tx_hash, error=error)

    def release(self, nonce: str) -> bool:
        key = str(nonce)
        with self._lock:
            record = self._entries.get(key)
            if record is None:
                return False
            if record.status != NonceStatus.FAILED or record.tx_hash:
                raise InvalidTransition(key, record.status.value, "released")
            del self._entries[key]
            return True

    def _transition(
        self,
        nonce: str,
        target: NonceStatus,
        tx_hash: Optional[str] = None,
        error: Optional[str] = None,
    ) -> NonceRecord:
        key = str(nonce)
        with self._lock:
            record = self._entries.get(key)
            if record is None:
                raise InvalidTransition(key, None, target.value)
            if target not in _TRANSITIONS[record.status]:
                raise InvalidTransition(key, record.status.value, target.value)

            record.status = target
            record.updated_at = time.time()
            if tx_hash:
                record.tx_hash = tx_hash
            if error is not None:
                record.error = error
            return record.model_copy()
