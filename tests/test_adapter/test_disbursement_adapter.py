"""
EVM Disbursement Adapter Test Suite

Tests EVMDisbursementAdapter against a mocked AsyncWeb3:
- Operator account loading from hex keys and mnemonics
- Token metadata lookup and fallbacks
- Transfer success, preparation failures and broadcast failures
- Local account-nonce allocation
- Optional receipt polling

Usage:
    pytest tests/test_adapter/test_disbursement_adapter.py -v
"""

import asyncio

import pytest

from airdrop_claim.adapters.evm.adapter import EVMDisbursementAdapter
from airdrop_claim.engine.exceptions import ConfigurationError
from airdrop_claim.schemas.bases import TransactionStatus

from test_mocks import (
    MOCK_CHAIN_ID,
    MOCK_CLAIMER_ADDRESS,
    MOCK_EXPECTED_AMOUNT,
    MOCK_OPERATOR_ADDRESS,
    MOCK_OPERATOR_MNEMONIC,
    MOCK_OPERATOR_PRIVATE_KEY,
    MOCK_TOKEN,
    MOCK_TOKEN_CHECKSUM,
    MOCK_TX_HASH,
    create_mock_web3,
)


def _adapter(web3, **kwargs):
    return EVMDisbursementAdapter(
        token=MOCK_TOKEN,
        chain_id=MOCK_CHAIN_ID,
        private_key=MOCK_OPERATOR_PRIVATE_KEY,
        web3=web3,
        **kwargs
    )


class TestInitialization:
    """Adapter construction and credential handling."""

    def test_init_with_private_key(self):
        web3, _ = create_mock_web3()
        adapter = _adapter(web3)

        assert adapter.get_wallet_address() == MOCK_OPERATOR_ADDRESS
        assert adapter.token_address == MOCK_TOKEN_CHECKSUM

    def test_init_with_mnemonic(self):
        web3, _ = create_mock_web3()
        adapter = EVMDisbursementAdapter(
            token=MOCK_TOKEN,
            chain_id=MOCK_CHAIN_ID,
            private_key=MOCK_OPERATOR_MNEMONIC,
            web3=web3,
        )
        assert adapter.get_wallet_address() == MOCK_OPERATOR_ADDRESS

    @pytest.mark.parametrize("credential", ["", "0x1234", "one two three", None])
    def test_invalid_credential_raises(self, credential):
        web3, _ = create_mock_web3()
        with pytest.raises(ConfigurationError):
            EVMDisbursementAdapter(token=MOCK_TOKEN, chain_id=MOCK_CHAIN_ID, private_key=credential, web3=web3)

    def test_requires_web3_or_rpc_url(self):
        with pytest.raises(ValueError, match="rpc_url"):
            EVMDisbursementAdapter(token=MOCK_TOKEN, chain_id=MOCK_CHAIN_ID, private_key=MOCK_OPERATOR_PRIVATE_KEY)


class TestTokenMetadata:
    """symbol() / decimals() lookup."""

    @pytest.mark.asyncio
    async def test_reads_contract(self):
        web3, _ = create_mock_web3(symbol="NY", decimals=6)
        metadata = await _adapter(web3).get_token_metadata()

        assert metadata.symbol == "NY"
        assert metadata.decimals == 6

    @pytest.mark.asyncio
    async def test_fallbacks(self):
        web3, _ = create_mock_web3(symbol=RuntimeError("no symbol"), decimals=RuntimeError("no decimals"))
        metadata = await _adapter(web3).get_token_metadata()

        assert metadata.symbol == "TKN"
        assert metadata.decimals == 18

    @pytest.mark.asyncio
    async def test_fallbacks_are_independent(self):
        web3, _ = create_mock_web3(symbol=RuntimeError("no symbol"), decimals=8)
        metadata = await _adapter(web3).get_token_metadata()

        assert metadata.symbol == "TKN"
        assert metadata.decimals == 8


class TestTransfer:
    """ERC-20 transfer execution."""

    @pytest.mark.asyncio
    async def test_transfer_success(self):
        web3, contract = create_mock_web3(tx_count=7)
        adapter = _adapter(web3)

        confirmation = await adapter.transfer(MOCK_CLAIMER_ADDRESS.lower(), MOCK_EXPECTED_AMOUNT)

        assert confirmation.is_success()
        assert confirmation.tx_hash == MOCK_TX_HASH
        assert confirmation.to_address == MOCK_CLAIMER_ADDRESS
        assert confirmation.amount == MOCK_EXPECTED_AMOUNT
        contract.functions.transfer.assert_called_with(MOCK_CLAIMER_ADDRESS, MOCK_EXPECTED_AMOUNT)

        params = contract.functions.transfer.return_value.build_transaction.call_args[0][0]
        assert params["nonce"] == 7
        assert params["chainId"] == MOCK_CHAIN_ID
        assert params["gas"] == 60_000
        web3.eth.send_raw_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_account_nonces_are_sequential(self):
        web3, contract = create_mock_web3(tx_count=3)
        adapter = _adapter(web3)

        await asyncio.gather(*(adapter.transfer(MOCK_CLAIMER_ADDRESS, 1) for _ in range(3)))

        build = contract.functions.transfer.return_value.build_transaction
        nonces = sorted(call.args[0]["nonce"] for call in build.call_args_list)
        assert nonces == [3, 4, 5]
        web3.eth.get_transaction_count.assert_awaited_once_with(MOCK_OPERATOR_ADDRESS, "pending")

    @pytest.mark.asyncio
    async def test_estimate_failure_is_invalid_transaction(self):
        web3, contract = create_mock_web3()
        contract.functions.transfer.return_value.estimate_gas.side_effect = ValueError(
            "execution reverted: ERC20: transfer amount exceeds balance"
        )
        adapter = _adapter(web3)

        confirmation = await adapter.transfer(MOCK_CLAIMER_ADDRESS, MOCK_EXPECTED_AMOUNT)

        assert confirmation.status == TransactionStatus.INVALID_TRANSACTION
        assert "exceeds balance" in confirmation.error_message
        assert not confirmation.was_broadcast
        web3.eth.get_transaction_count.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_broadcast_failure_resets_account_nonce(self):
        web3, _ = create_mock_web3(tx_count=10)
        web3.eth.send_raw_transaction.side_effect = [ConnectionError("rpc down"), b"\xab" * 32]
        adapter = _adapter(web3)

        failed = await adapter.transfer(MOCK_CLAIMER_ADDRESS, 1)
        assert failed.status == TransactionStatus.NETWORK_ERROR
        assert failed.error_message == "rpc down"

        ok = await adapter.transfer(MOCK_CLAIMER_ADDRESS, 1)
        assert ok.is_success()
        assert web3.eth.get_transaction_count.await_count == 2


class TestReceipts:
    """wait_for_receipt mode."""

    @pytest.mark.asyncio
    async def test_mined_receipt(self):
        web3, _ = create_mock_web3(block_number=103)
        adapter = _adapter(web3, wait_for_receipt=True, receipt_poll_interval=0)

        confirmation = await adapter.transfer(MOCK_CLAIMER_ADDRESS, 1)

        assert confirmation.is_success()
        assert confirmation.block_number == 100
        assert confirmation.confirmations == 3

    @pytest.mark.asyncio
    async def test_reverted_receipt(self):
        web3, _ = create_mock_web3(receipt={"status": 0, "blockNumber": 100, "gasUsed": 30_000})
        adapter = _adapter(web3, wait_for_receipt=True, receipt_poll_interval=0)

        confirmation = await adapter.transfer(MOCK_CLAIMER_ADDRESS, 1)

        assert confirmation.status == TransactionStatus.FAILED
        assert confirmation.tx_hash == MOCK_TX_HASH
        assert confirmation.was_broadcast

    @pytest.mark.asyncio
    async def test_receipt_timeout(self):
        web3, _ = create_mock_web3()
        web3.eth.get_transaction_receipt.return_value = None
        adapter = _adapter(web3, wait_for_receipt=True, max_receipt_attempts=3, receipt_poll_interval=0)

        confirmation = await adapter.transfer(MOCK_CLAIMER_ADDRESS, 1)

        assert confirmation.status == TransactionStatus.TIMEOUT
        assert web3.eth.get_transaction_receipt.await_count == 3
