from .events import (
    BaseEvent,
    BreakEvent,
    ClaimReceivedEvent,
    ClaimVerifiedEvent,
    NonceReservedEvent,
    ClaimDisbursedEvent,
    ClaimRejectedEvent,
    DisbursementFailedEvent,
    Dependencies,
    EventBus,
)
from .executors import EventChain
from .ledger import NonceLedger, InMemoryNonceLedger, NonceRecord, NonceStatus

__all__ = [
    "BaseEvent",
    "BreakEvent",
    "ClaimReceivedEvent",
    "ClaimVerifiedEvent",
    "NonceReservedEvent",
    "ClaimDisbursedEvent",
    "ClaimRejectedEvent",
    "DisbursementFailedEvent",
    "Dependencies",
    "EventBus",
    "EventChain",
    "NonceLedger",
    "InMemoryNonceLedger",
    "NonceRecord",
    "NonceStatus",
]
