"""
EVM Adapter Schema Models

Pydantic models for claim verification and disbursement on EVM chains. All
classes inherit from the base schema hierarchy in ``schemas.bases``.

Result classes:
    - RecoveryResult: Outcome of recovering a signer under one signing domain.
    - EVMVerificationResult: Outcome of verifying a whole claim.
    - EVMTransactionConfirmation: Outcome of the ERC-20 transfer.

Supporting classes:
    - TokenMetadata: Symbol and decimals read from the token contract.
"""

from typing import Optional, Literal

from pydantic import Field

from ...schemas.bases import (
    BaseVerificationResult,
    BaseTransactionConfirmation,
    CanonicalModel,
)


class RecoveryResult(CanonicalModel):
    """
    Outcome of an ECDSA signer recovery under a single EIP-712 domain.

    Recovery succeeding is not authentication: a signature over a different
    message still recovers to *some* address. Callers must compare
    ``address`` with the expected signer.

    Attributes:
        recovered: ``True`` when an address could be recovered.
        address: Recovered signer in checksum format (``None`` on failure).
        domain_name: Name of the domain the recovery was attempted under.
        error: Reason recovery failed (malformed signature, bad recovery id, ...).

    Example::

        result = recover_claim_signer(domain, message, signature)
        if result.matches(claimer):
            ...
    """

    recovered: bool = Field(..., description="Whether a signer address was recovered")
    address: Optional[str] = Field(None, description="Recovered signer address (checksum)")
    domain_name: Optional[str] = Field(None, description="EIP-712 domain name used")
    error: Optional[str] = Field(None, description="Failure reason when recovery failed")

    def matches(self, expected: Optional[str]) -> bool:
        """True when recovery succeeded and the signer equals ``expected`` (any letter case)."""
        if not self.recovered or not self.address or not isinstance(expected, str):
            return False
        return self.address.lower() == expected.lower()


class EVMVerificationResult(BaseVerificationResult):
    """
    Verification outcome for a claim.

    Attributes:
        verification_type: Always ``"evm"``.
        claimer: Claimer address as submitted.
        nonce: Ledger key of the claim nonce.
        domain_name: Accepted domain the signature matched under (success only).
        recovered_address: Signer recovered under the matching domain (success only).
    """

    verification_type: Literal["evm"] = Field(default="evm", description="Verification type identifier")
    claimer: Optional[str] = Field(None, description="Claimer address as submitted")
    nonce: Optional[str] = Field(None, description="Claim nonce (ledger key)")
    domain_name: Optional[str] = Field(None, description="Matching EIP-712 domain name")
    recovered_address: Optional[str] = Field(None, description="Recovered signer address")


class EVMTransactionConfirmation(BaseTransactionConfirmation):
    """
    Outcome of an ERC-20 ``transfer`` issued by the operator wallet.

    ``tx_hash`` is ``"0x"`` when no transaction was broadcast, which lets the
    ledger tell a failure before broadcast from a failure after it.

    Attributes:
        confirmation_type: Always ``"evm"``.
        tx_hash: Transaction hash (0x-prefixed hex string).
        block_number: Block containing the transaction (receipt mode only).
        gas_used: Gas consumed (receipt mode only).
        to_address: Recipient of the tokens.
        amount: Transferred amount in base units.
    """

    confirmation_type: Literal["evm"] = Field(default="evm", description="Confirmation type identifier")
    tx_hash: str = Field(..., description="Transaction hash (0x-prefixed hex string on EVM)")
    block_number: Optional[int] = Field(None, ge=0, description="Block number containing transaction")
    gas_used: Optional[int] = Field(None, ge=0, description="Actual gas consumed by transaction")
    to_address: Optional[str] = Field(None, description="Token recipient address")
    amount: Optional[int] = Field(None, ge=0, description="Transferred amount in base units")

    @property
    def was_broadcast(self) -> bool:
        return self.tx_hash not in ("", "0x")


class TokenMetadata(CanonicalModel):
    """
    ERC-20 metadata read once at startup.

    Attributes:
        symbol: Token symbol (``"TKN"`` when the contract call fails).
        decimals: Decimal precision (``18`` when the contract call fails).
    """

    symbol: str = Field(default="TKN", description="Token symbol")
    decimals: int = Field(default=18, ge=0, le=255, description="Token decimals")
