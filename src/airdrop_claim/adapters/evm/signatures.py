"""
EVM Off-Chain Claim Signing Utilities

Local EIP-712 signing helpers for the ``Claim`` struct. All cryptographic
operations are performed in-process using ``eth_account``; no RPC calls or
on-chain state queries are made.

Exported helpers
----------------
sign_claim
    Build the EIP-712 payload, sign it with the claimer's private key, and
    return a complete ``ClaimRequest`` ready to be posted to ``/api/claim``.

build_claim_typed_data
    Re-exported from ``verifies``. Produces the typed-data dict without
    signing, for hand-off to an external signer (browser wallet, HSM).
"""

import os
import time
from typing import Optional, Union

from eth_account import Account

from .domains import DEFAULT_DOMAIN_VERSION
from .standards import EIP712Domain
from .verifies import build_claim_typed_data
from ...schemas.https import ClaimRequest


def sign_claim(
    *,
    private_key: str,
    token: str,
    chain_id: int,
    amount: int,
    domain_name: str,
    domain_version: str = DEFAULT_DOMAIN_VERSION,
    nonce: Optional[Union[int, str]] = None,
    deadline: Optional[int] = None,
) -> ClaimRequest:
    """
    Sign a claim with the claimer's key and return the request body.

    The claimer address is derived from ``private_key``. Amount, nonce and
    deadline are emitted as decimal strings, the way browser front-ends
    serialize uint256 values.

    Args:
        private_key:    Hex-encoded secp256k1 private key of the claimer.
        token:          ERC-20 token contract address the claim is for.
        chain_id:       EVM network ID the claim is scoped to.
        amount:         Claimed amount in the token's base units.
        domain_name:    EIP-712 domain ``name`` (one of the accepted names,
                        e.g. ``"Airdrop"``).
        domain_version: EIP-712 domain ``version``; defaults to ``"1"``.
        nonce:          Single-use identifier. A random 64-bit integer is
                        generated when omitted.
        deadline:       Expiry timestamp; defaults to now + 1 hour.

    Returns:
        ``ClaimRequest`` with ``signature`` populated (0x-prefixed, 65 bytes).

    Example::

        claim = sign_claim(
            private_key="0xCLAIMER_KEY",
            token="0xaD6a4F5AF2dAddE7801EAbEa764A7D4cF0EF7Cb3",
            chain_id=137,
            amount=1000 * 10**18,
            domain_name="Airdrop",
            nonce="42",
        )
        httpx.post(f"{base_url}/api/claim", json=claim.model_dump())
    """
    account = Account.from_key(private_key)
    resolved_nonce = int(nonce) if nonce is not None else int.from_bytes(os.urandom(8), "big")
    resolved_deadline = deadline if deadline is not None else int(time.time()) + 3600

    typed_data = build_claim_typed_data(
        domain=EIP712Domain(name=domain_name, version=domain_version, chainId=int(chain_id)),
        claimer=account.address,
        amount=int(amount),
        nonce=resolved_nonce,
        deadline=int(resolved_deadline),
    )
    signed = Account.sign_typed_data(private_key, full_message=typed_data)

    signature_hex = signed.signature.hex()
    if not signature_hex.startswith("0x"):
        signature_hex = "0x" + signature_hex

    return ClaimRequest(
        token=token,
        claimer=account.address,
        amount=str(int(amount)),
        nonce=str(resolved_nonce),
        deadline=str(int(resolved_deadline)),
        signature=signature_hex,
    )
