"""
Airdrop Claim Server - Event-driven FastAPI wrapper.

Exposes ``GET /health`` and ``POST /api/claim`` on top of the claim event
chain. Token metadata is read once at startup; the expected claim amount in
base units is derived from it and never changes for the life of the process.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..adapters.bases import DisbursementAdapter
from ..adapters.evm.adapter import EVMDisbursementAdapter
from ..adapters.evm.constants import amount_to_value
from ..adapters.evm.domains import DomainResolver
from ..adapters.evm.schemas import TokenMetadata
from ..engine.events import (
    EventBus,
    Dependencies,
    BaseEvent,
    ClaimDisbursedEvent,
    ClaimRejectedEvent,
)
from ..engine.exceptions import ConfigurationError
from ..engine.ledger import NonceLedger, InMemoryNonceLedger
from ..schemas.https import ClaimSuccessResponse, ErrorResponse, HealthResponse
from ..settings import ClaimSettings
from ..utils import get_logger
from .flows import setup_event_bus, ClaimService, SERVER_ERROR_MESSAGE

logger = get_logger("server")


class ClaimServer(FastAPI):
    """FastAPI server verifying signed claims and paying them out."""

    def __init__(
        self,
        settings: Optional[ClaimSettings] = None,
        disbursement: Optional[DisbursementAdapter] = None,
        ledger: Optional[NonceLedger] = None,
        clock: Optional[Callable[[], float]] = None,
        **fastapi_kwargs
    ):
        """Initialize the claim server.

        The disbursement adapter is built here, so an invalid ``PRIVATE_KEY``
        raises before the application is handed to uvicorn.

        Args:
            settings: Server settings (default: ``ClaimSettings.from_env()``)
            disbursement: Transfer backend (default: EVM adapter from settings)
            ledger: Nonce ledger (default: new in-memory ledger)
            clock: Time source for deadline checks (default: ``time.time``)
            **fastapi_kwargs: FastAPI arguments (title, version, etc.)

        Raises:
            ConfigurationError: If the signing credential or settings are invalid.
        """
        self.settings = settings or ClaimSettings.from_env()
        self.disbursement = disbursement or EVMDisbursementAdapter(
            token=self.settings.token,
            chain_id=self.settings.chain_id,
            rpc_url=self.settings.rpc_url,
            private_key=self.settings.private_key,
            request_timeout=self.settings.rpc_timeout,
            wait_for_receipt=self.settings.wait_for_receipt,
        )
        self.ledger = ledger if ledger is not None else InMemoryNonceLedger()
        self.domain_resolver = DomainResolver(
            chain_id=self.settings.chain_id,
            names=self.settings.domain_names,
        )
        self.event_bus: EventBus = setup_event_bus()
        self._clock = clock

        self.token_metadata: Optional[TokenMetadata] = None
        self.expected_amount: Optional[int] = None
        self.depends: Optional[Dependencies] = None
        self.service: Optional[ClaimService] = None
        self._init_lock = asyncio.Lock()

        fastapi_kwargs.setdefault("title", "Airdrop Claim API")
        super().__init__(lifespan=self._lifespan, **fastapi_kwargs)

        self.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
        self._setup_health_endpoint()
        self._setup_claim_endpoint()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.initialize()
        yield

    async def initialize(self) -> None:
        """Read token metadata and build the claim service. Safe to call repeatedly."""
        async with self._init_lock:
            if self.service is not None:
                return

            metadata = await self.disbursement.get_token_metadata()
            try:
                expected_amount = amount_to_value(amount=self.settings.amount, decimals=metadata.decimals)
            except ValueError as e:
                raise ConfigurationError(f"AMOUNT is invalid: {e}") from e

            deps_kwargs = dict(
                disbursement=self.disbursement,
                ledger=self.ledger,
                domain_resolver=self.domain_resolver,
                expected_token=self.settings.token,
                expected_amount=expected_amount,
            )
            if self._clock is not None:
                deps_kwargs["clock"] = self._clock

            self.token_metadata = metadata
            self.expected_amount = expected_amount
            self.depends = Dependencies(**deps_kwargs)
            self.service = ClaimService(self.depends, event_bus=self.event_bus)

            logger.info(
                "Claim server ready on :%d | chain=%d sender=%s token=%s (%s, %d decimals) amount=%s -> %d base units | domains=%s",
                self.settings.port,
                self.settings.chain_id,
                self.disbursement.get_wallet_address(),
                self.settings.token,
                metadata.symbol,
                metadata.decimals,
                self.settings.amount,
                expected_amount,
                list(self.domain_resolver.names),
            )

    def subscribe(self, event_class: type[BaseEvent], handler: Callable) -> None:
        """Register event handler.

        Args:
            event_class: Event type to handle
            handler: Async function(event, deps) -> Optional[BaseEvent]
        """
        self.event_bus.subscribe(event_class, handler)

    def add_hook(self, event_class: type[BaseEvent], hook: Callable) -> None:
        """Register event hook for side effects.

        Args:
            event_class: Event type to hook into
            hook: Async function(event, deps) -> None
        """
        self.event_bus.hook(event_class, hook)

    def hook(self, event_class: type[BaseEvent]) -> Callable:
        """Decorator for registering event hooks.

        Example:
            @app.hook(ClaimDisbursedEvent)
            async def on_paid(event, deps):
                await notify(event.claimer, event.tx_hash)
        """
        def decorator(hook_func: Callable) -> Callable:
            self.event_bus.hook(event_class, hook_func)
            return hook_func
        return decorator

    def _setup_health_endpoint(self, path: str = "/health") -> None:
        @self.get(path)
        async def health():
            """Static process configuration."""
            await self.initialize()
            return HealthResponse(
                chainId=self.settings.chain_id,
                token=self.settings.token,
                symbol=self.token_metadata.symbol,
                decimals=self.token_metadata.decimals,
                sender=self.disbursement.get_wallet_address(),
            ).model_dump(mode="json")

    def _setup_claim_endpoint(self, path: str = "/api/claim") -> None:
        @self.post(path)
        async def claim(request: Request):
            """Verify a signed claim and transfer the fixed amount to the claimer."""
            try:
                payload = await request.json()
            except ValueError:
                payload = {}

            try:
                await self.initialize()
                outcome = await self.service.process(payload)
            except Exception:
                logger.exception("Unhandled error while processing claim")
                return JSONResponse(
                    status_code=500,
                    content=ErrorResponse(error=SERVER_ERROR_MESSAGE).model_dump(),
                )

            if isinstance(outcome, ClaimDisbursedEvent):
                return JSONResponse(
                    status_code=200,
                    content=ClaimSuccessResponse(txHash=outcome.tx_hash).model_dump(),
                )
            if isinstance(outcome, ClaimRejectedEvent):
                return JSONResponse(
                    status_code=400,
                    content=ErrorResponse(error=outcome.reason).model_dump(),
                )
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(error=outcome.error_message or SERVER_ERROR_MESSAGE).model_dump(),
            )
