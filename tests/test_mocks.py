"""
Claim Test Mocks Module

Provides mock data and utilities for testing claim verification, the nonce
ledger, the event chain and the HTTP server without blockchain connectivity.

Key Components:
    - Fixed operator / claimer keys (well-known development keys)
    - Real EIP-712 claim signatures produced with eth_account
    - A fake disbursement adapter recording transfers
    - A mock AsyncWeb3 for the EVM disbursement adapter

Usage:
    from test_mocks import (
        make_claim,
        FakeDisbursementAdapter,
        MOCK_EXPECTED_AMOUNT,
    )

    body = make_claim(domain_name="Airdrop", nonce=1)
    adapter = FakeDisbursementAdapter()
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple, Union
from unittest.mock import AsyncMock, MagicMock

from eth_account import Account
from web3 import AsyncWeb3

from airdrop_claim.adapters.bases import DisbursementAdapter
from airdrop_claim.adapters.evm.constants import DEFAULT_TOKEN
from airdrop_claim.adapters.evm.domains import DomainResolver
from airdrop_claim.adapters.evm.schemas import EVMTransactionConfirmation, TokenMetadata
from airdrop_claim.adapters.evm.signatures import sign_claim
from airdrop_claim.engine.events import Dependencies
from airdrop_claim.engine.ledger import InMemoryNonceLedger
from airdrop_claim.schemas.bases import TransactionStatus


# ========================================================================
# Mock Blockchain Constants
# ========================================================================

# Well-known development keys (hardhat accounts #0 and #1)
MOCK_OPERATOR_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
MOCK_OPERATOR_ADDRESS = Account.from_key(MOCK_OPERATOR_PRIVATE_KEY).address
MOCK_OPERATOR_MNEMONIC = "test test test test test test test test test test test junk"

MOCK_CLAIMER_PRIVATE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
MOCK_CLAIMER_ADDRESS = Account.from_key(MOCK_CLAIMER_PRIVATE_KEY).address

MOCK_OTHER_PRIVATE_KEY = "0x5de4111afa1a4b94908f83103eb1f1706367c2e68ca870fc3fb9a804cdab365a"

MOCK_TOKEN = DEFAULT_TOKEN.lower()
MOCK_TOKEN_CHECKSUM = AsyncWeb3.to_checksum_address(DEFAULT_TOKEN)
MOCK_CHAIN_ID = 137
MOCK_DECIMALS = 18
MOCK_EXPECTED_AMOUNT = 1000 * 10 ** MOCK_DECIMALS

# Frozen "now" for deadline checks
MOCK_NOW = 1_700_000_000
MOCK_DEADLINE = MOCK_NOW + 3600

MOCK_TX_HASH_BYTES = bytes.fromhex("ab" * 32)
MOCK_TX_HASH = "0x" + "ab" * 32


# ========================================================================
# Claim Factories
# ========================================================================

def make_claim(
    domain_name: str = "Airdrop",
    nonce: Union[int, str] = 1,
    deadline: int = MOCK_DEADLINE,
    amount: int = MOCK_EXPECTED_AMOUNT,
    chain_id: int = MOCK_CHAIN_ID,
    token: str = MOCK_TOKEN,
    private_key: str = MOCK_CLAIMER_PRIVATE_KEY,
    **overrides: Any,
) -> Dict[str, Any]:
    """
    Build a signed claim body as a front-end would post it.

    ``overrides`` replace fields after signing, which produces claims whose
    signature no longer matches.
    """
    claim = sign_claim(
        private_key=private_key,
        token=token,
        chain_id=chain_id,
        amount=amount,
        domain_name=domain_name,
        nonce=nonce,
        deadline=deadline,
    )
    body = claim.model_dump()
    body.update(overrides)
    return body


def make_domains(chain_id: int = MOCK_CHAIN_ID):
    return DomainResolver(chain_id=chain_id).candidates()


# ========================================================================
# Fake Disbursement Adapter
# ========================================================================

class FakeDisbursementAdapter(DisbursementAdapter):
    """
    In-memory disbursement adapter.

    Records every transfer and returns sequential fake transaction hashes.
    Can be told to fail, to raise, or to pause inside ``transfer`` so that
    concurrent claims overlap.
    """

    def __init__(
        self,
        fail_with: Optional[str] = None,
        raise_error: Optional[Exception] = None,
        delay: float = 0.0,
        metadata: Optional[TokenMetadata] = None,
    ):
        self.fail_with = fail_with
        self.raise_error = raise_error
        self.delay = delay
        self.metadata = metadata or TokenMetadata(symbol="NY", decimals=MOCK_DECIMALS)
        self.transfers: List[Tuple[str, int]] = []

    async def get_token_metadata(self) -> TokenMetadata:
        return self.metadata

    def get_wallet_address(self) -> str:
        return MOCK_OPERATOR_ADDRESS

    async def transfer(self, to: str, amount: int) -> EVMTransactionConfirmation:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.transfers.append((to, amount))
        if self.raise_error is not None:
            raise self.raise_error
        if self.fail_with is not None:
            return EVMTransactionConfirmation(
                status=TransactionStatus.INVALID_TRANSACTION,
                tx_hash="0x",
                to_address=to,
                amount=amount,
                error_message=self.fail_with,
            )
        return EVMTransactionConfirmation(
            status=TransactionStatus.SUCCESS,
            tx_hash="0x" + format(len(self.transfers), "064x"),
            to_address=to,
            amount=amount,
        )


def make_deps(
    adapter: Optional[DisbursementAdapter] = None,
    ledger: Optional[InMemoryNonceLedger] = None,
    now: int = MOCK_NOW,
) -> Dependencies:
    return Dependencies(
        disbursement=adapter or FakeDisbursementAdapter(),
        ledger=ledger if ledger is not None else InMemoryNonceLedger(),
        domain_resolver=DomainResolver(chain_id=MOCK_CHAIN_ID),
        expected_token=MOCK_TOKEN,
        expected_amount=MOCK_EXPECTED_AMOUNT,
        clock=lambda: now,
    )


# ========================================================================
# Mock Web3
# ========================================================================

class AwaitableValue:
    """Stands in for awaitable properties such as ``AsyncEth.gas_price``."""

    def __init__(self, value):
        self.value = value

    def __await__(self):
        async def _value():
            return self.value
        return _value().__await__()


def create_mock_web3(
    symbol: Any = "NY",
    decimals: Any = MOCK_DECIMALS,
    tx_count: int = 7,
    receipt: Optional[Dict[str, Any]] = None,
    block_number: int = 101,
) -> Tuple[MagicMock, MagicMock]:
    """
    Build a mock ``AsyncWeb3`` and its ERC-20 contract.

    Passing an ``Exception`` as ``symbol`` or ``decimals`` makes that call fail.

    Returns:
        ``(web3, contract)``
    """
    contract = MagicMock()

    def _call(value):
        if isinstance(value, Exception):
            return AsyncMock(side_effect=value)
        return AsyncMock(return_value=value)

    contract.functions.symbol.return_value.call = _call(symbol)
    contract.functions.decimals.return_value.call = _call(decimals)

    tx_fn = MagicMock()
    tx_fn.estimate_gas = AsyncMock(return_value=50_000)
    tx_fn.build_transaction = AsyncMock(side_effect=lambda params: {
        **params,
        "to": MOCK_TOKEN_CHECKSUM,
        "value": 0,
        "data": "0xa9059cbb",
    })
    contract.functions.transfer.return_value = tx_fn

    web3 = MagicMock()
    web3.eth.contract.return_value = contract
    web3.eth.gas_price = AwaitableValue(30 * 10 ** 9)
    web3.eth.block_number = AwaitableValue(block_number)
    web3.eth.get_transaction_count = AsyncMock(return_value=tx_count)
    web3.eth.send_raw_transaction = AsyncMock(return_value=MOCK_TX_HASH_BYTES)
    web3.eth.get_transaction_receipt = AsyncMock(
        return_value=receipt or {"status": 1, "blockNumber": 100, "gasUsed": 35_000}
    )
    return web3, contract
