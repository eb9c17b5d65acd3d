"""
EVM Disbursement Adapter

Provides the server-side ERC-20 operations the claim service needs: reading
token metadata at startup and paying out verified claims from the operator
wallet.

Key Features:
    - Token ``symbol()`` / ``decimals()`` lookup with safe fallbacks
    - ERC-20 ``transfer`` signed locally by the operator account
    - Concurrent disbursements with locally allocated account nonces
    - Optional receipt polling to detect on-chain reverts

Dependencies:
    - web3.py: For blockchain RPC interaction
    - eth_account: For transaction signing
"""

from typing import Optional
import asyncio
import time

from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound
from eth_account.signers.local import LocalAccount

from ...schemas.bases import TransactionStatus
from ...utils import get_logger
from ..bases import DisbursementAdapter
from .schemas import EVMTransactionConfirmation, TokenMetadata
from .ERC20_ABI import get_erc20_claim_abi
from .constants import load_signer_account, FALLBACK_SYMBOL, FALLBACK_DECIMALS

logger = get_logger("evm")


class EVMDisbursementAdapter(DisbursementAdapter):
    """
    ERC-20 disbursement adapter for a single token on a single chain.

    The operator account is resolved eagerly in the constructor, so an
    invalid credential aborts start-up before any request is served.

    Account nonces are allocated from a local counter guarded by a short
    lock; only the allocation is serialized. Gas estimation, signing,
    broadcasting and receipt polling for different claims run concurrently.
    After a failed broadcast the counter is dropped and re-read from the node
    on the next transfer.

    Attributes:
        account: Operator account signing the transfers
        wallet_address: Checksum-formatted operator address
        token_address: Checksum-formatted token contract address
        chain_id: Chain id stamped on every transaction

    Example:
        adapter = EVMDisbursementAdapter(
            token="0xaD6a4F5AF2dAddE7801EAbEa764A7D4cF0EF7Cb3",
            chain_id=137,
            rpc_url="https://polygon-rpc.com",
            private_key="0x...",
        )
        metadata = await adapter.get_token_metadata()
        confirmation = await adapter.transfer(claimer, 1000 * 10**metadata.decimals)
    """

    def __init__(
        self,
        token: str,
        chain_id: int,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        account: Optional[LocalAccount] = None,
        web3: Optional[AsyncWeb3] = None,
        request_timeout: int = 60,
        wait_for_receipt: bool = False,
        max_receipt_attempts: int = 60,
        receipt_poll_interval: float = 2.0,
    ):
        """
        Initialize the adapter.

        Args:
            token: ERC-20 token contract address.
            chain_id: Chain id of the network ``rpc_url`` points at.
            rpc_url: JSON-RPC endpoint; ignored when ``web3`` is given.
            private_key: Operator credential (hex key or mnemonic); ignored
                when ``account`` is given.
            account: Pre-built operator account.
            web3: Pre-built ``AsyncWeb3`` instance (tests, custom providers).
            request_timeout: RPC request timeout in seconds.
            wait_for_receipt: Poll for the receipt and report reverts as
                ``FAILED`` instead of returning right after broadcast.
            max_receipt_attempts: Receipt polls before giving up.
            receipt_poll_interval: Seconds between receipt polls.

        Raises:
            ConfigurationError: If the credential is invalid.
            ValueError: If neither ``web3`` nor ``rpc_url`` is provided.
        """
        self.account = account if account is not None else load_signer_account(private_key or "")
        self.wallet_address = AsyncWeb3.to_checksum_address(self.account.address)
        self.token_address = AsyncWeb3.to_checksum_address(token)
        self.chain_id = int(chain_id)

        if web3 is None:
            if not rpc_url:
                raise ValueError("Either 'web3' or 'rpc_url' must be provided")
            web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": request_timeout}
            ))
        self._web3 = web3
        self._contract = web3.eth.contract(address=self.token_address, abi=get_erc20_claim_abi())

        self._wait_for_receipt = wait_for_receipt
        self._max_receipt_attempts = max_receipt_attempts
        self._receipt_poll_interval = receipt_poll_interval

        self._nonce_lock = asyncio.Lock()
        self._next_nonce: Optional[int] = None

    def get_wallet_address(self) -> str:
        """
        Get operator wallet address.

        Returns:
            str: Operator wallet address in checksum format
        """
        return self.wallet_address

    async def get_token_metadata(self) -> TokenMetadata:
        """
        Read ``symbol()`` and ``decimals()`` from the token contract.

        Each call falls back independently (``"TKN"`` / ``18``) when the
        contract does not answer, so a token without metadata still works.

        Returns:
            TokenMetadata
        """
        try:
            symbol = str(await self._contract.functions.symbol().call())
        except Exception as e:
            logger.warning("symbol() failed for %s, using %r: %s", self.token_address, FALLBACK_SYMBOL, e)
            symbol = FALLBACK_SYMBOL

        try:
            decimals = int(await self._contract.functions.decimals().call())
        except Exception as e:
            logger.warning("decimals() failed for %s, using %d: %s", self.token_address, FALLBACK_DECIMALS, e)
            decimals = FALLBACK_DECIMALS

        return TokenMetadata(symbol=symbol, decimals=decimals)

    async def transfer(self, to: str, amount: int) -> EVMTransactionConfirmation:
        """
        Send ``amount`` base units of the token from the operator wallet to ``to``.

        Steps:
        1. Estimate gas; a revert here (e.g. "transfer amount exceeds
           balance") is reported as ``INVALID_TRANSACTION``.
        2. Allocate the next operator account nonce.
        3. Build, sign and broadcast; failures are ``NETWORK_ERROR``.
        4. Optionally poll for the receipt (``wait_for_receipt``).

        Args:
            to: Recipient address (any letter case).
            amount: Amount in base units.

        Returns:
            :class:`EVMTransactionConfirmation`. No exceptions are raised;
            all errors are captured in the return value.
        """
        try:
            recipient = AsyncWeb3.to_checksum_address(to)
            tx_fn = self._contract.functions.transfer(recipient, int(amount))
            gas_estimate = await tx_fn.estimate_gas({"from": self.wallet_address})
            gas_price = await self._web3.eth.gas_price
        except Exception as e:
            return EVMTransactionConfirmation(
                status=TransactionStatus.INVALID_TRANSACTION,
                tx_hash="0x",
                to_address=to,
                amount=int(amount),
                error_message=str(e) or "Transfer could not be prepared",
            )

        try:
            tx_nonce = await self._allocate_nonce()
            tx_dict = await tx_fn.build_transaction({
                "from": self.wallet_address,
                "chainId": self.chain_id,
                "gas": int(gas_estimate * 1.2),
                "gasPrice": gas_price,
                "nonce": tx_nonce,
            })
            signed_tx = self.account.sign_transaction(tx_dict)
            tx_hash = await self._web3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            self._next_nonce = None
            return EVMTransactionConfirmation(
                status=TransactionStatus.NETWORK_ERROR,
                tx_hash="0x",
                to_address=recipient,
                amount=int(amount),
                error_message=str(e) or "Failed to broadcast transaction",
            )

        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)
        logger.debug("Broadcast transfer %s -> %s (%d)", tx_hash_hex, recipient, int(amount))

        if not self._wait_for_receipt:
            return EVMTransactionConfirmation(
                status=TransactionStatus.SUCCESS,
                tx_hash=tx_hash_hex,
                to_address=recipient,
                amount=int(amount),
            )
        return await self._confirm(tx_hash_hex, recipient, int(amount))

    async def _allocate_nonce(self) -> int:
        """Return the next operator account nonce, reading it from the node on first use."""
        async with self._nonce_lock:
            if self._next_nonce is None:
                self._next_nonce = await self._web3.eth.get_transaction_count(self.wallet_address, "pending")
            nonce = self._next_nonce
            self._next_nonce += 1
            return nonce

    async def _confirm(self, tx_hash_hex: str, recipient: str, amount: int) -> EVMTransactionConfirmation:
        """
        Poll for the receipt of a broadcast transfer.

        Returns:
            :class:`EVMTransactionConfirmation` with receipt data on success,
            or a ``TIMEOUT`` / ``FAILED`` result.
        """
        receipt = None
        started = time.monotonic()
        for _ in range(self._max_receipt_attempts):
            try:
                receipt = await self._web3.eth.get_transaction_receipt(tx_hash_hex)
                if receipt:
                    break
            except TransactionNotFound:
                pass  # still pending
            await asyncio.sleep(self._receipt_poll_interval)

        if not receipt:
            return EVMTransactionConfirmation(
                status=TransactionStatus.TIMEOUT,
                tx_hash=tx_hash_hex,
                to_address=recipient,
                amount=amount,
                error_message="Transaction confirmation timed out",
            )

        current_block = await self._web3.eth.block_number
        confirmations = max(0, current_block - receipt["blockNumber"])

        if receipt.get("status") == 1:
            logger.debug("Transfer %s mined after %.1fs", tx_hash_hex, time.monotonic() - started)
            return EVMTransactionConfirmation(
                status=TransactionStatus.SUCCESS,
                tx_hash=tx_hash_hex,
                block_number=receipt["blockNumber"],
                gas_used=receipt["gasUsed"],
                confirmations=confirmations,
                to_address=recipient,
                amount=amount,
            )
        return EVMTransactionConfirmation(
            status=TransactionStatus.FAILED,
            tx_hash=tx_hash_hex,
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
            confirmations=confirmations,
            to_address=recipient,
            amount=amount,
            error_message="Transaction reverted on-chain",
        )
