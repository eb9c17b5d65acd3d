from .bases import CanonicalModel, VerificationStatus, BaseVerificationResult, TransactionStatus, BaseTransactionConfirmation
from .https import ClaimRequest, ClaimSuccessResponse, ErrorResponse, HealthResponse

__all__ = [
    "CanonicalModel",
    "VerificationStatus",
    "BaseVerificationResult",
    "TransactionStatus",
    "BaseTransactionConfirmation",
    "ClaimRequest",
    "ClaimSuccessResponse",
    "ErrorResponse",
    "HealthResponse",
]
