"""
HTTP client for the claim server.

Extends ``httpx.AsyncClient`` with helpers that read the server's
configuration, sign a claim locally and submit it.
"""

from typing import Any, Dict, Optional, Union

import httpx

from ..adapters.evm.domains import DEFAULT_DOMAIN_VERSION
from ..adapters.evm.signatures import sign_claim
from ..engine.exceptions import (
    ClaimValidationError,
    NonceConflictError,
    DisbursementError,
)
from ..schemas.bases import VerificationStatus
from ..schemas.https import ClaimRequest, ClaimSuccessResponse, HealthResponse


class ClaimClient(httpx.AsyncClient):
    """
    Extended httpx.AsyncClient for claim front-ends, scripts and tests.

    Fully compatible with httpx.AsyncClient - supports all methods, properties,
    and can be used as an async context manager.

    Usage:
        ```python
        async with ClaimClient(private_key="0x...", base_url="http://localhost:8787") as client:
            result = await client.claim(amount=1000 * 10**18, domain_name="Airdrop")
            print(result.txHash)
        ```
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        health_path: str = "/health",
        claim_path: str = "/api/claim",
        **kwargs
    ):
        """
        Initialize client.

        Args:
            private_key: Claimer key used by ``claim``; not needed for
                ``submit_claim`` with pre-signed claims.
            health_path: Health endpoint path.
            claim_path: Claim endpoint path.
            **kwargs: All standard httpx.AsyncClient arguments (base_url, timeout, transport, etc.)
        """
        super().__init__(**kwargs)
        self._private_key = private_key
        self._health_path = health_path
        self._claim_path = claim_path
        self._health: Optional[HealthResponse] = None

    async def get_health(self, refresh: bool = False) -> HealthResponse:
        """
        Fetch (and cache) the server configuration.

        Raises:
            httpx.HTTPStatusError: If the server does not answer 200.
        """
        if self._health is None or refresh:
            response = await self.get(self._health_path)
            response.raise_for_status()
            self._health = HealthResponse.model_validate(response.json())
        return self._health

    async def submit_claim(self, claim: Union[ClaimRequest, Dict[str, Any]]) -> httpx.Response:
        """Post a claim body as-is and return the raw response."""
        body = claim.model_dump(mode="json") if isinstance(claim, ClaimRequest) else claim
        return await self.post(self._claim_path, json=body)

    async def claim(
        self,
        amount: int,
        domain_name: str,
        nonce: Optional[Union[int, str]] = None,
        deadline: Optional[int] = None,
        domain_version: str = DEFAULT_DOMAIN_VERSION,
    ) -> ClaimSuccessResponse:
        """
        Sign a claim for the server's token and chain, submit it, and parse the answer.

        Args:
            amount: Claimed amount in base units.
            domain_name: EIP-712 domain name to sign under.
            nonce: Claim nonce (random when omitted).
            deadline: Expiry timestamp (now + 1 hour when omitted).
            domain_version: EIP-712 domain version.

        Returns:
            ClaimSuccessResponse carrying the transfer transaction hash.

        Raises:
            ValueError: If the client has no private key.
            ClaimValidationError: The server rejected the claim.
            NonceConflictError: The nonce was already used.
            DisbursementError: The server failed to transfer.
        """
        if not self._private_key:
            raise ValueError("A private key is required to sign claims")

        health = await self.get_health()
        signed = sign_claim(
            private_key=self._private_key,
            token=health.token,
            chain_id=health.chainId,
            amount=amount,
            domain_name=domain_name,
            domain_version=domain_version,
            nonce=nonce,
            deadline=deadline,
        )
        response = await self.submit_claim(signed)
        return self._parse_claim_response(response, signed.nonce_key)

    def _parse_claim_response(self, response: httpx.Response, nonce: str) -> ClaimSuccessResponse:
        """
        Map a claim response to a result or the matching exception.

        Args:
            response: Response of ``POST /api/claim``
            nonce: Nonce of the submitted claim

        Returns:
            Parsed success body
        """
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 200:
            return ClaimSuccessResponse.model_validate(body)

        error = str(body.get("error", "")) if isinstance(body, dict) else ""
        if response.status_code == 400:
            status = VerificationStatus.from_http_message(error)
            if status == VerificationStatus.NONCE_USED:
                raise NonceConflictError(nonce)
            raise ClaimValidationError(status or VerificationStatus.BAD_SIGNATURE, error or None)

        raise DisbursementError(error or f"HTTP {response.status_code}", nonce=nonce)
