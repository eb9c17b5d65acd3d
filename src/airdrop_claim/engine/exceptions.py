"""
Exception and Error Definitions Module

Defines the custom exception hierarchy for claim verification, nonce
reservation, and disbursement. All exceptions inherit from the project-level
BaseException for unified exception handling.

Exception Hierarchy:
    BaseException (root)
    ├── ConfigurationError
    ├── ClaimError
    │   ├── ClaimValidationError
    │   └── NonceConflictError
    ├── DisbursementError
    └── InvalidTransition
"""

from typing import Optional

from ..schemas.bases import VerificationStatus


class BaseException(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions should inherit from this class to enable
    unified exception handling and centralized error processing.
    """
    pass


class ConfigurationError(BaseException):
    """
    Raised when configuration is missing or invalid.

    This is the only fatal condition: it is raised while the server is being
    constructed, before any request is accepted. Scenarios include:
    - Signing credential that is neither a hex private key nor a mnemonic
    - Non-numeric chain id, port or amount
    - Amount not representable in the token's base units
    """
    pass


class ClaimError(BaseException):
    """
    Base exception for client-caused claim failures.

    Attributes:
        status: Verification status describing the failure
    """

    def __init__(self, status: VerificationStatus, message: Optional[str] = None):
        self.status = status
        super().__init__(message or status.http_message)

    @property
    def http_message(self) -> str:
        return self.status.http_message


class ClaimValidationError(ClaimError):
    """
    Raised when a claim fails one of the stateless or signature checks.

    Covers bad token, bad claimer, bad amount, expired deadline and bad
    signature. The client can recover by resubmitting corrected input.
    """
    pass


class NonceConflictError(ClaimError):
    """
    Raised when a claim's nonce has already been consumed.

    Indicates either a replay attempt or two racing submissions of the same
    claim. The client must obtain a fresh nonce.
    """

    def __init__(self, nonce: str):
        self.nonce = nonce
        super().__init__(VerificationStatus.NONCE_USED, f"Nonce already used: {nonce}")


class DisbursementError(BaseException):
    """
    Raised when the token transfer fails after the nonce was reserved.

    The nonce stays consumed. Typical causes are insufficient operator
    balance, RPC failures and contract reverts.

    Attributes:
        nonce: Nonce of the claim whose transfer failed
        tx_hash: Transaction hash if the transaction was broadcast
    """

    def __init__(self, message: str, nonce: Optional[str] = None, tx_hash: Optional[str] = None):
        self.nonce = nonce
        self.tx_hash = tx_hash
        super().__init__(message)


class InvalidTransition(BaseException):
    """
    Raised when a nonce ledger entry is moved to a state it cannot reach.

    For example confirming a nonce that was never reserved, or releasing a
    nonce whose transfer was broadcast.

    Attributes:
        nonce: Ledger key of the entry
        current_state: State of the entry before the transition
        target_state: State the caller tried to move to
    """

    def __init__(self, nonce: str, current_state: Optional[str], target_state: str):
        self.nonce = nonce
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(
            f"Invalid nonce transition for {nonce!r}: {current_state} -> {target_state}"
        )
