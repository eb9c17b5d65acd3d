"""
HTTP Request/Response Schema Models for the Airdrop Claim Service

This module defines all Pydantic models used for HTTP communication between
claiming front-ends and the server. These models ensure type-safe, validated
serialization/deserialization of all HTTP requests and responses.

The claim flow consists of:
1. Client reads ``GET /health`` to learn chain id, token and decimals
2. Client signs the EIP-712 ``Claim`` struct with the claimer's key
3. Client posts the claim to ``POST /api/claim``
4. Server answers with the transfer transaction hash or an error reason

All models inherit from BaseModel for automatic validation and serialization.
"""

from typing import Optional, Any

from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# Claim Request
# ============================================================================

UINT256_MAX = 2**256 - 1

#: Ledger key prefix for nonces that are not a uint256. Reserved keys are
#: always plain decimal strings, so prefixed keys never collide with them.
INVALID_NONCE_PREFIX = "invalid:"


def parse_uint256(value: Any) -> Optional[int]:
    """
    Interpret an untrusted request field as a uint256.

    Integers, decimal strings and 0x-prefixed hex strings are accepted.

    Returns:
        The integer value, or ``None`` when the field is missing, negative,
        out of range or not a number.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == "0x":
                parsed = int(text, 16)
            elif text.isascii() and text.isdigit():
                parsed = int(text)
            else:
                return None
        except ValueError:
            return None
    else:
        return None
    if parsed < 0 or parsed > UINT256_MAX:
        return None
    return parsed


class ClaimRequest(BaseModel):
    """Claim submitted by a front-end.

    Every attribute is untrusted and kept exactly as posted: fields are not
    type-checked at parse time, so a malformed value surfaces through the
    ordered claim checks as the matching rejection reason rather than as a
    framework validation error.

    Attributes:
        token: ERC-20 token contract address (any letter case).
        claimer: Address that signed the claim and receives the tokens.
        amount: Claimed amount in base units (integer or decimal string).
        nonce: Single-use identifier chosen by the issuer (integer or string).
        deadline: Unix timestamp (seconds) after which the claim is stale.
        signature: 65-byte ECDSA signature as 0x-prefixed hex.
    """
    model_config = ConfigDict(extra="ignore")

    token: Any = Field(default=None, description="Token contract address")
    claimer: Any = Field(default=None, description="Claimer address")
    amount: Any = Field(default=None, description="Amount in base units")
    nonce: Any = Field(default=None, description="Single-use claim nonce")
    deadline: Any = Field(default=None, description="Expiry unix timestamp")
    signature: Any = Field(default=None, description="0x-prefixed 65-byte signature")

    @property
    def nonce_key(self) -> str:
        """Ledger key of this claim's nonce.

        Every spelling of the same uint256 (``42``, ``"042"``, ``"0x2A"``)
        maps to its decimal form, since they all sign the same struct.
        """
        nonce = parse_uint256(self.nonce)
        if nonce is None:
            return f"{INVALID_NONCE_PREFIX}{self.nonce!s}"
        return str(nonce)

    @classmethod
    def parse_untrusted(cls, payload: Any) -> "ClaimRequest":
        """Build a claim from a decoded JSON body.

        A body that is not a JSON object is treated as an empty claim.
        """
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)


# ============================================================================
# Responses
# ============================================================================

class ClaimSuccessResponse(BaseModel):
    """Response returned once the transfer transaction has been broadcast.

    Attributes:
        ok: Always ``True``.
        txHash: Hash of the ERC-20 transfer transaction.
    """
    ok: bool = Field(default=True, description="Success flag")
    txHash: str = Field(..., description="Transfer transaction hash (0x-prefixed)")


class ErrorResponse(BaseModel):
    """Error body used for both 400 (rejection) and 500 (disbursement failure)."""
    error: str = Field(..., description="Stable rejection reason or failure message")


class HealthResponse(BaseModel):
    """Static process configuration reported by ``GET /health``.

    Attributes:
        ok: Always ``True``.
        chainId: Chain id the claims are signed for.
        token: Lower-cased token contract address.
        symbol: Token symbol read from the contract at startup.
        decimals: Token decimal precision read from the contract at startup.
        sender: Address of the operator wallet paying out claims.
    """
    ok: bool = Field(default=True, description="Success flag")
    chainId: int = Field(..., description="EVM chain id")
    token: str = Field(..., description="Token contract address (lower-case)")
    symbol: str = Field(..., description="Token symbol")
    decimals: int = Field(..., ge=0, description="Token decimals")
    sender: str = Field(..., description="Operator wallet address")
