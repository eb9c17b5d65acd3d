from .adapter import EVMDisbursementAdapter
from .domains import DomainResolver, DEFAULT_DOMAIN_NAMES, DEFAULT_DOMAIN_VERSION
from .schemas import (
    RecoveryResult,
    EVMVerificationResult,
    EVMTransactionConfirmation,
    TokenMetadata,
)
from .standards import EIP712Domain, ClaimMessage, ClaimTypedData
from .signatures import sign_claim
from .verifies import (
    build_claim_typed_data,
    recover_claim_signer,
    verify_claim,
)
from .constants import amount_to_value, load_signer_account

__all__ = [
    "EVMDisbursementAdapter",
    "DomainResolver",
    "DEFAULT_DOMAIN_NAMES",
    "DEFAULT_DOMAIN_VERSION",
    "RecoveryResult",
    "EVMVerificationResult",
    "EVMTransactionConfirmation",
    "TokenMetadata",
    "EIP712Domain",
    "ClaimMessage",
    "ClaimTypedData",
    "sign_claim",
    "build_claim_typed_data",
    "recover_claim_signer",
    "verify_claim",
    "amount_to_value",
    "load_signer_account",
]
