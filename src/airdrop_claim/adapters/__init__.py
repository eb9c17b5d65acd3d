from .bases import DisbursementAdapter
from .evm import (
    EVMDisbursementAdapter,
    DomainResolver,
    EVMVerificationResult,
    EVMTransactionConfirmation,
    TokenMetadata,
)

__all__ = [
    "DisbursementAdapter",
    "EVMDisbursementAdapter",
    "DomainResolver",
    "EVMVerificationResult",
    "EVMTransactionConfirmation",
    "TokenMetadata",
]
