"""
Event-driven system with typed events and clear data flow.

Events carry their own data, handlers return next events, and dependencies
are injected separately from business data.

Claim workflow:

    ClaimReceivedEvent -> ClaimVerifiedEvent -> NonceReservedEvent -> ClaimDisbursedEvent

with ``ClaimRejectedEvent`` (validation or nonce conflict) and
``DisbursementFailedEvent`` as the error exits.
"""

import asyncio
import inspect
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Callable, Optional, Awaitable, AsyncGenerator

from pydantic import BaseModel, ConfigDict

from ..adapters.bases import DisbursementAdapter
from ..adapters.evm.domains import DomainResolver
from ..adapters.evm.schemas import EVMVerificationResult, EVMTransactionConfirmation
from ..schemas.bases import VerificationStatus
from ..schemas.https import ClaimRequest
from .ledger import NonceLedger

# ==================== Base Event ====================

class BaseEvent(ABC):
    """Base class for all events in the system."""

    @abstractmethod
    def __repr__(self) -> str:
        """String representation of the event."""
        pass


# ==================== Trigger Events (External) ====================

class ClaimReceivedEvent(BaseModel, BaseEvent):
    """External trigger: a claim body arrived (decoded JSON, or an already parsed claim)."""
    payload: Any = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimReceivedEvent(type={type(self.payload).__name__})"


# ==================== Intermediate Events ====================

class ClaimVerifiedEvent(BaseModel, BaseEvent):
    """All stateless and signature checks passed; the nonce is not reserved yet."""
    claim: ClaimRequest
    verification_result: EVMVerificationResult

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimVerifiedEvent(nonce={self.claim.nonce_key}, domain={self.verification_result.domain_name})"


class NonceReservedEvent(BaseModel, BaseEvent):
    """The claim's nonce was consumed; disbursement may start."""
    claim: ClaimRequest

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"NonceReservedEvent(nonce={self.claim.nonce_key})"


# ==================== Result Events ====================

class ClaimDisbursedEvent(BaseModel, BaseEvent):
    """Result: the transfer transaction was broadcast (and confirmed, when waiting)."""
    nonce: str
    claimer: str
    tx_hash: str
    confirmation: EVMTransactionConfirmation

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimDisbursedEvent(nonce={self.nonce}, tx_hash={self.tx_hash})"


class ClaimRejectedEvent(BaseModel, BaseEvent):
    """Result: the claim failed validation or its nonce was already consumed."""
    status: VerificationStatus
    message: Optional[str] = None
    nonce: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def reason(self) -> str:
        """Stable client-facing reason, e.g. ``"Bad signature"``."""
        return self.status.http_message

    def __repr__(self) -> str:
        return f"ClaimRejectedEvent(reason={self.reason})"


class DisbursementFailedEvent(BaseModel, BaseEvent):
    """Result: the nonce was reserved but the transfer failed."""
    error_message: str
    nonce: Optional[str] = None
    tx_hash: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"DisbursementFailedEvent(nonce={self.nonce}, error={self.error_message})"


class BreakEvent(BaseModel, BaseEvent):
    """Internal event to break the event chain."""
    break_reason: str = ""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return "BreakEvent()"


TERMINAL_EVENTS = (ClaimDisbursedEvent, ClaimRejectedEvent, DisbursementFailedEvent)


# ==================== Dependencies Container ====================

@dataclass(frozen=True)
class Dependencies:
    """Container for infrastructure dependencies (read-only)."""
    disbursement: Optional[DisbursementAdapter] = None
    ledger: Optional[NonceLedger] = None
    domain_resolver: Optional[DomainResolver] = None
    expected_token: str = ""
    expected_amount: int = 0
    clock: Callable[[], float] = field(default=time.time)


# ==================== Event Bus ====================

EventHandlerFunc = Callable[[BaseEvent, Dependencies], Awaitable[Optional[BaseEvent]]]
EventHookFunc = Callable[[BaseEvent, Dependencies], Awaitable[None]]


class EventBus:
    """Event dispatcher for publishing and subscribing to events."""

    def __init__(self) -> None:
        """Initialize with empty subscribers and hooks."""
        self._subscribers: Dict[type, list[EventHandlerFunc]] = {}
        self._hooks: Dict[type, list[EventHookFunc]] = {}

    def subscribe(self, event_class: type[BaseEvent], handler: EventHandlerFunc) -> None:
        """
        Register an async handler for the given event class.
        Multiple handlers can be subscribed to the same event type and run in parallel.

        Args:
            event_class: The event class to subscribe to.
            handler: The async handler function to call when the event is published.

        Raises:
            TypeError: If handler is not a coroutine function.
        """
        if not inspect.iscoroutinefunction(handler):
            raise TypeError(f"Handler must be a coroutine function, got {type(handler).__name__}")

        self._subscribers.setdefault(event_class, []).append(handler)

    def hook(self, event_class: type[BaseEvent], hook_func: EventHookFunc) -> None:
        """
        Register a hook for the given event class.
        Hooks are executed before subscribers when the event is dispatched.

        Args:
            event_class: The event class to hook into.
            hook_func: The hook function to call when the event is published.
        """
        if not inspect.iscoroutinefunction(hook_func):
            raise TypeError(f"Hook must be a coroutine function, got {type(hook_func).__name__}")

        self._hooks.setdefault(event_class, []).append(hook_func)

    async def dispatch(self, event: BaseEvent, deps: Dependencies) -> AsyncGenerator[Optional[BaseEvent], None]:
        """
        Dispatch an event to all registered hooks and subscribers.
        Hooks run first (concurrently, awaited together), then all subscribers run in parallel.

        Args:
            event: The event to dispatch.
            deps: Dependencies container with injected services.

        Yields:
            Results from all subscribers as they complete. Yields nothing if no subscribers are registered.
        """
        hooks = self._hooks.get(type(event), [])
        await asyncio.gather(*(hook(event, deps) for hook in hooks))

        handlers = self._subscribers.get(type(event), [])
        if not handlers:
            return

        tasks = [handler(event, deps) for handler in handlers]
        for coro in asyncio.as_completed(tasks):
            result = await coro
            yield result
