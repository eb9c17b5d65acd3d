"""Signed EIP-712 claim verification and ERC-20 disbursement service."""

from .servers import ClaimServer, ClaimService
from .clients import ClaimClient
from .settings import ClaimSettings
from .adapters.evm import (
    EVMDisbursementAdapter,
    DomainResolver,
    sign_claim,
    verify_claim,
)
from .engine.ledger import InMemoryNonceLedger

__version__ = "0.1.0"

__all__ = [
    "ClaimServer",
    "ClaimService",
    "ClaimClient",
    "ClaimSettings",
    "EVMDisbursementAdapter",
    "DomainResolver",
    "sign_claim",
    "verify_claim",
    "InMemoryNonceLedger",
]
