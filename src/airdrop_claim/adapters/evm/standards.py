from dataclasses import dataclass, field
from typing import Dict, Any, List


# -----------------------------
# EIP-712 Domain
# -----------------------------

@dataclass(frozen=True)
class EIP712Domain:
    """
    EIP-712 domain separator for claim signatures.

    Claims are scoped to ``name``, ``version`` and ``chainId`` only; no
    ``verifyingContract`` is bound, because the authorization is checked
    off-chain by this service rather than by a contract.
    """
    name: str
    version: str
    chainId: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
        }


# -----------------------------
# Claim message
# -----------------------------


@dataclass
class ClaimMessage:
    """
    Represents the message payload of the ``Claim`` EIP-712 struct.

    All uint256 fields are plain Python integers; conversion from the
    untrusted request (where they may arrive as strings) happens before the
    message is built.

    Attributes:
        claimer: Address entitled to receive the tokens (checksum format).
        amount: Amount in the token's base units (uint256).
        nonce: Single-use claim identifier (uint256).
        deadline: Unix timestamp after which the claim is stale (uint256).
    """
    claimer: str
    amount: int
    nonce: int
    deadline: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claimer": self.claimer,
            "amount": self.amount,
            "nonce": self.nonce,
            "deadline": self.deadline,
        }


@dataclass
class ClaimTypedData:
    """
    Container for ``Claim`` typed data usable with EIP-712 signing routines.

    ``to_dict()`` produces the ``{types, primaryType, domain, message}``
    layout consumed by ``eth_account.messages.encode_typed_data`` and by
    ``eth_signTypedData_v4`` in browser wallets.

    Attributes:
        domain: EIP712Domain instance describing the signing domain.
        message: ClaimMessage instance carrying the payload.
        primary_type: The primary EIP-712 type (always "Claim").
        types: The typed definitions required by EIP-712 (fixed schema).
    """
    domain: EIP712Domain
    message: ClaimMessage

    primary_type: str = "Claim"

    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
            ],
            "Claim": [
                {"name": "claimer", "type": "address"},
                {"name": "amount", "type": "uint256"},
                {"name": "nonce", "type": "uint256"},
                {"name": "deadline", "type": "uint256"},
            ],
        }
    )

    def to_dict(self) -> Dict[str, Any]:
        """Return a dictionary compatible with EIP-712 structured signing."""
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }
