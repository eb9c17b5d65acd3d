"""
Base Schema Models for the Airdrop Claim Service

This module defines the fundamental base classes shared by every other schema
model. It provides the foundation for type safety, validation, and consistent
result reporting across the verification and disbursement paths.

Core Classes:
    - CanonicalModel: Pydantic base model with deterministic JSON serialization
    - VerificationStatus: Outcome codes of a claim verification (one per rejection reason)
    - BaseVerificationResult: Abstract verification result model
    - TransactionStatus: Outcome codes of a disbursement transaction
    - BaseTransactionConfirmation: Abstract transaction confirmation model

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Optional, Dict, Any
from abc import ABC
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Produces deterministically ordered, whitespace-minimal JSON so that two
    equal models always serialize to the same string (useful for logging and
    for comparing results in tests).

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string (sorted keys, compact separators).

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json")
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()


class VerificationStatus(str, Enum):
    """
    Enumeration of possible claim verification statuses.

    Every non-success member corresponds to exactly one stable rejection
    reason reported to clients (see ``http_message``).

    Attributes:
        SUCCESS: All checks passed and the signer matches the claimer
        BAD_TOKEN: Token address differs from the configured token
        BAD_CLAIMER: Claimer is not a syntactically valid address
        BAD_AMOUNT: Amount differs from the fixed claim amount
        EXPIRED: Deadline is in the past
        NONCE_USED: Nonce has already been consumed
        BAD_SIGNATURE: No accepted signing domain recovers to the claimer
    """
    SUCCESS = "success"
    BAD_TOKEN = "bad_token"
    BAD_CLAIMER = "bad_claimer"
    BAD_AMOUNT = "bad_amount"
    EXPIRED = "expired"
    NONCE_USED = "nonce_used"
    BAD_SIGNATURE = "bad_signature"

    @property
    def http_message(self) -> str:
        """Client-facing reason string, e.g. ``"Bad token"`` or ``"Nonce used"``."""
        return _HTTP_MESSAGES[self]

    @classmethod
    def from_http_message(cls, message: str) -> Optional["VerificationStatus"]:
        """Inverse of ``http_message``; ``None`` for an unknown reason string."""
        for status, text in _HTTP_MESSAGES.items():
            if text == message and status is not cls.SUCCESS:
                return status
        return None


_HTTP_MESSAGES: Dict[VerificationStatus, str] = {
    VerificationStatus.SUCCESS: "OK",
    VerificationStatus.BAD_TOKEN: "Bad token",
    VerificationStatus.BAD_CLAIMER: "Bad claimer",
    VerificationStatus.BAD_AMOUNT: "Bad amount",
    VerificationStatus.EXPIRED: "Expired",
    VerificationStatus.NONCE_USED: "Nonce used",
    VerificationStatus.BAD_SIGNATURE: "Bad signature",
}


class BaseVerificationResult(CanonicalModel, ABC):
    """
    Abstract base class for claim verification results.

    Encapsulates the outcome of verifying a claim: a status code, a boolean
    shortcut, a human-readable message, and optional diagnostic details.

    Attributes:
        verification_type: Type of verification (e.g., "evm")
        status: Verification result status (VerificationStatus enum)
        is_valid: Boolean indicating if verification was successful
        message: Human-readable status message
        error_details: Detailed error information if verification failed
        verified_at: Timestamp when verification was performed

    Methods:
        is_success: Check if verification was successful
        get_error_message: Get formatted error message
    """

    verification_type: str = Field(..., description="Type of verification (e.g., evm)")
    status: VerificationStatus = Field(..., description="Verification result status")
    is_valid: bool = Field(..., description="Whether the claim is valid and verified")
    message: str = Field(..., description="Human-readable status message")
    error_details: Optional[Dict[str, Any]] = Field(None, description="Detailed error information")
    verified_at: datetime = Field(default_factory=datetime.now, description="Verification timestamp")

    def is_success(self) -> bool:
        """
        Check if verification was successful.

        Returns:
            bool: True if verification was successful, False otherwise.

        Example:
            result = verify_claim(...)
            if result.is_success():
                # Reserve nonce and disburse
        """
        return self.is_valid and self.status == VerificationStatus.SUCCESS

    def get_error_message(self) -> Optional[str]:
        """
        Get formatted error message from verification result.

        Returns:
            Optional[str]: Error message if verification failed, None if successful.
        """
        if self.is_success():
            return None

        error_msg = f"Verification failed: {self.message}"
        if self.error_details:
            details_str = json.dumps(self.error_details, indent=2, default=str)
            error_msg += f"\nDetails: {details_str}"
        return error_msg


class TransactionStatus(str, Enum):
    """
    Enumeration of possible transaction execution statuses.

    Attributes:
        SUCCESS: Transaction accepted by the node (and mined, when receipts are awaited)
        FAILED: Transaction reverted on-chain
        PENDING: Transaction is pending confirmation
        TIMEOUT: Transaction confirmation timed out
        NETWORK_ERROR: Network error during transaction submission
        INVALID_TRANSACTION: Transaction could not be built (bad params, revert on estimate)
        UNKNOWN_ERROR: Unexpected error during transaction execution
    """
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    INVALID_TRANSACTION = "invalid_transaction"
    UNKNOWN_ERROR = "unknown_error"


class BaseTransactionConfirmation(CanonicalModel, ABC):
    """
    Abstract base class for blockchain transaction confirmation data.

    Attributes:
        confirmation_type: Type of confirmation (e.g., "evm")
        status: Transaction execution status (TransactionStatus enum)
        confirmations: Number of block confirmations
        error_message: Error message if transaction failed
        created_at: Timestamp when confirmation was recorded

    Methods:
        is_success: Check if transaction executed successfully
        get_confirmation_status: Get human-readable confirmation status
    """

    confirmation_type: str = Field(..., description="Type of confirmation (e.g., evm)")
    status: TransactionStatus = Field(..., description="Transaction execution status")
    confirmations: int = Field(default=0, ge=0, description="Number of block confirmations")
    error_message: Optional[str] = Field(None, description="Error message if transaction failed")
    created_at: datetime = Field(default_factory=datetime.now, description="Confirmation recording timestamp")

    def is_success(self) -> bool:
        """
        Check if the transaction succeeded.

        Returns:
            bool: True if transaction succeeded, False if failed or pending.
        """
        return self.status == TransactionStatus.SUCCESS

    def get_confirmation_status(self) -> str:
        """
        Get human-readable confirmation status message.

        Returns:
            str: Human-readable status message describing transaction state.
        """
        if self.status == TransactionStatus.SUCCESS:
            confirmations_text = f"with {self.confirmations} confirmations" if self.confirmations > 0 else "pending confirmations"
            return f"Transaction confirmed {confirmations_text}"
        elif self.status == TransactionStatus.PENDING:
            return "Transaction is pending confirmation"
        else:
            return f"Transaction failed: {self.error_message or self.status.value}"
