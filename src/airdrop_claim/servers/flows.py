"""
Built-in event handlers for the claim workflow.

Implements the core flow: claim verification → nonce reservation → disbursement.
"""

from typing import Any, Optional, Union

from ..engine.events import (
    EventBus,
    Dependencies,
    BaseEvent,
    ClaimReceivedEvent,
    ClaimVerifiedEvent,
    NonceReservedEvent,
    ClaimDisbursedEvent,
    ClaimRejectedEvent,
    DisbursementFailedEvent,
    TERMINAL_EVENTS,
)
from ..engine.executors import EventChain
from ..engine.exceptions import (
    ClaimValidationError,
    NonceConflictError,
    DisbursementError,
)
from ..adapters.evm.verifies import verify_claim
from ..schemas.bases import VerificationStatus
from ..schemas.https import ClaimRequest
from ..utils import get_logger

logger = get_logger("flows")

#: Error message returned when the transfer failed without a reason.
SERVER_ERROR_MESSAGE = "Server error"


# ==================== Event Handlers ====================

async def handle_claim_received(
    event: ClaimReceivedEvent,
    deps: Dependencies
) -> ClaimVerifiedEvent | ClaimRejectedEvent:
    """Parse the claim and run every check that does not consume the nonce."""
    if isinstance(event.payload, ClaimRequest):
        claim = event.payload
    else:
        claim = ClaimRequest.parse_untrusted(event.payload)

    result = verify_claim(
        claim,
        expected_token=deps.expected_token,
        expected_amount=deps.expected_amount,
        domains=deps.domain_resolver.candidates(),
        current_time=int(deps.clock()),
        ledger=deps.ledger,
    )
    if not result.is_success():
        return ClaimRejectedEvent(
            status=result.status,
            message=result.message,
            nonce=claim.nonce_key,
        )
    return ClaimVerifiedEvent(claim=claim, verification_result=result)


async def handle_claim_verified(
    event: ClaimVerifiedEvent,
    deps: Dependencies
) -> NonceReservedEvent | ClaimRejectedEvent:
    """Consume the nonce; losing the race means the claim was already used."""
    nonce = event.claim.nonce_key
    if not deps.ledger.try_reserve(nonce):
        return ClaimRejectedEvent(
            status=VerificationStatus.NONCE_USED,
            message="Nonce was reserved by a concurrent claim",
            nonce=nonce,
        )
    return NonceReservedEvent(claim=event.claim)


async def handle_nonce_reserved(
    event: NonceReservedEvent,
    deps: Dependencies
) -> ClaimDisbursedEvent | DisbursementFailedEvent:
    """Transfer the fixed amount to the claimer. The nonce stays consumed on failure."""
    nonce = event.claim.nonce_key
    claimer = event.claim.claimer
    deps.ledger.mark_pending(nonce)

    try:
        confirmation = await deps.disbursement.transfer(claimer, deps.expected_amount)
    except Exception as e:
        message = str(e) or SERVER_ERROR_MESSAGE
        deps.ledger.mark_failed(nonce, message)
        return DisbursementFailedEvent(error_message=message, nonce=nonce)

    if confirmation.is_success():
        deps.ledger.mark_confirmed(nonce, confirmation.tx_hash)
        return ClaimDisbursedEvent(
            nonce=nonce,
            claimer=claimer,
            tx_hash=confirmation.tx_hash,
            confirmation=confirmation,
        )

    tx_hash = confirmation.tx_hash if confirmation.was_broadcast else None
    message = confirmation.error_message or SERVER_ERROR_MESSAGE
    deps.ledger.mark_failed(nonce, message, tx_hash=tx_hash)
    return DisbursementFailedEvent(error_message=message, nonce=nonce, tx_hash=tx_hash)


# ==================== Logging Hooks ====================

async def log_claim_rejected(event: ClaimRejectedEvent, deps: Dependencies) -> None:
    if event.status == VerificationStatus.NONCE_USED:
        logger.warning("Claim rejected: %s (nonce=%s)", event.reason, event.nonce)
    else:
        logger.info("Claim rejected: %s (nonce=%s) %s", event.reason, event.nonce, event.message or "")


async def log_claim_disbursed(event: ClaimDisbursedEvent, deps: Dependencies) -> None:
    logger.info("Claim paid: nonce=%s claimer=%s tx=%s", event.nonce, event.claimer, event.tx_hash)


async def log_disbursement_failed(event: DisbursementFailedEvent, deps: Dependencies) -> None:
    logger.error("Disbursement failed: nonce=%s tx=%s error=%s", event.nonce, event.tx_hash, event.error_message)


# ==================== Event Bus Setup ====================

def setup_event_bus(enable_logging: bool = True) -> EventBus:
    """Initialize event bus with built-in handlers.

    Args:
        enable_logging: If True, terminal events are logged through hooks.
    """
    event_bus = EventBus()

    event_bus.subscribe(ClaimReceivedEvent, handle_claim_received)
    event_bus.subscribe(ClaimVerifiedEvent, handle_claim_verified)
    event_bus.subscribe(NonceReservedEvent, handle_nonce_reserved)

    if enable_logging:
        event_bus.hook(ClaimRejectedEvent, log_claim_rejected)
        event_bus.hook(ClaimDisbursedEvent, log_claim_disbursed)
        event_bus.hook(DisbursementFailedEvent, log_disbursement_failed)

    return event_bus


# ==================== Service Facade ====================

ClaimOutcome = Union[ClaimDisbursedEvent, ClaimRejectedEvent, DisbursementFailedEvent]


class ClaimService:
    """
    Runs one claim through the event chain and returns its terminal event.

    Every claim either completes with a transaction hash, is rejected with a
    reason, or fails during disbursement. No step is retried.

    Example:
        service = ClaimService(deps)
        outcome = await service.process(payload)
        if isinstance(outcome, ClaimDisbursedEvent):
            print(outcome.tx_hash)
    """

    def __init__(self, deps: Dependencies, event_bus: Optional[EventBus] = None):
        self.deps = deps
        self.event_bus = event_bus or setup_event_bus()

    async def process(self, request: Any, raise_on_error: bool = False) -> ClaimOutcome:
        """
        Process a claim.

        Args:
            request: Decoded JSON body or a ``ClaimRequest``.
            raise_on_error: Raise instead of returning rejection / failure events.

        Returns:
            The terminal event of the chain.

        Raises:
            ClaimValidationError: Claim rejected (``raise_on_error`` only).
            NonceConflictError: Nonce already used (``raise_on_error`` only).
            DisbursementError: Transfer failed (``raise_on_error`` only).
        """
        outcome: Optional[BaseEvent] = None
        chain = EventChain(self.event_bus, self.deps)
        # Drain the chain so hooks on the terminal event have run.
        async for event in chain.execute(ClaimReceivedEvent(payload=request)):
            if isinstance(event, TERMINAL_EVENTS) and outcome is None:
                outcome = event

        if outcome is None:
            outcome = DisbursementFailedEvent(error_message=SERVER_ERROR_MESSAGE)

        if raise_on_error:
            if isinstance(outcome, ClaimRejectedEvent):
                if outcome.status == VerificationStatus.NONCE_USED:
                    raise NonceConflictError(outcome.nonce)
                raise ClaimValidationError(outcome.status, outcome.message)
            if isinstance(outcome, DisbursementFailedEvent):
                raise DisbursementError(outcome.error_message, nonce=outcome.nonce, tx_hash=outcome.tx_hash)
        return outcome
