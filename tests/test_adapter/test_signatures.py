"""
Claim Signing Test Suite

Tests sign_claim output shape and that its signatures verify under the
domain they were produced for.
"""

import time

from airdrop_claim.adapters.evm.signatures import sign_claim
from airdrop_claim.adapters.evm.standards import EIP712Domain
from airdrop_claim.adapters.evm.verifies import build_claim_typed_data

from test_mocks import (
    MOCK_CHAIN_ID,
    MOCK_CLAIMER_ADDRESS,
    MOCK_CLAIMER_PRIVATE_KEY,
    MOCK_EXPECTED_AMOUNT,
    MOCK_TOKEN,
)


class TestSignClaim:
    """sign_claim builds complete request bodies."""

    def test_fields(self):
        claim = sign_claim(
            private_key=MOCK_CLAIMER_PRIVATE_KEY,
            token=MOCK_TOKEN,
            chain_id=MOCK_CHAIN_ID,
            amount=MOCK_EXPECTED_AMOUNT,
            domain_name="NY Airdrop",
            nonce=42,
            deadline=1_800_000_000,
        )

        assert claim.claimer == MOCK_CLAIMER_ADDRESS
        assert claim.token == MOCK_TOKEN
        assert claim.amount == str(MOCK_EXPECTED_AMOUNT)
        assert claim.nonce == "42"
        assert claim.deadline == "1800000000"
        assert claim.signature.startswith("0x")
        assert len(claim.signature) == 132

    def test_defaults(self):
        before = int(time.time())
        claim = sign_claim(
            private_key=MOCK_CLAIMER_PRIVATE_KEY,
            token=MOCK_TOKEN,
            chain_id=MOCK_CHAIN_ID,
            amount=1,
            domain_name="Claim",
        )

        assert int(claim.deadline) >= before + 3600
        assert 0 <= int(claim.nonce) < 2 ** 64

    def test_random_nonces_differ(self):
        kwargs = dict(
            private_key=MOCK_CLAIMER_PRIVATE_KEY,
            token=MOCK_TOKEN,
            chain_id=MOCK_CHAIN_ID,
            amount=1,
            domain_name="Claim",
        )
        assert sign_claim(**kwargs).nonce != sign_claim(**kwargs).nonce


class TestBuildClaimTypedData:
    """Typed data layout."""

    def test_layout(self):
        data = build_claim_typed_data(
            domain=EIP712Domain(name="Airdrop", version="1", chainId=MOCK_CHAIN_ID),
            claimer=MOCK_CLAIMER_ADDRESS.lower(),
            amount=5,
            nonce=6,
            deadline=7,
        )

        assert data["primaryType"] == "Claim"
        assert data["domain"] == {"name": "Airdrop", "version": "1", "chainId": MOCK_CHAIN_ID}
        assert [f["name"] for f in data["types"]["Claim"]] == ["claimer", "amount", "nonce", "deadline"]
        assert [f["name"] for f in data["types"]["EIP712Domain"]] == ["name", "version", "chainId"]
        assert data["message"] == {
            "claimer": MOCK_CLAIMER_ADDRESS,
            "amount": 5,
            "nonce": 6,
            "deadline": 7,
        }
