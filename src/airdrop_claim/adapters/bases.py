"""
Abstract Base Class for Disbursement Adapters

Defines the interface the claim workflow uses to pay out a verified claim.
The workflow treats the adapter as a black box: it either returns a
confirmation carrying a transaction hash, or a failed confirmation carrying
a message. Implementations must not raise for ordinary transfer failures.

Core Classes:
    - DisbursementAdapter: token metadata, operator address, and transfer
"""

from abc import ABC, abstractmethod

from ..schemas.bases import BaseTransactionConfirmation


class DisbursementAdapter(ABC):
    """
    Abstract Base Class for chain-specific disbursement adapters.

    Key Responsibilities:
    1. get_token_metadata: read symbol and decimals of the paid-out token
    2. get_wallet_address: expose the operator (sender) address
    3. transfer: send a fixed amount of the token to a claimer

    Example Implementation:
        class EVMDisbursementAdapter(DisbursementAdapter):
            # ERC-20 transfer via web3.py
            pass
    """

    @abstractmethod
    async def get_token_metadata(self):
        """
        Read the token's symbol and decimal precision.

        Returns:
            Token metadata model; implementations fall back to defaults
            rather than raising when the token does not answer.
        """
        pass

    @abstractmethod
    def get_wallet_address(self) -> str:
        """
        Get the operator address paying out claims.

        Returns:
            str: Operator wallet address
        """
        pass

    @abstractmethod
    async def transfer(self, to: str, amount: int) -> BaseTransactionConfirmation:
        """
        Transfer ``amount`` base units of the token to ``to``.

        Args:
            to: Recipient address
            amount: Amount in base units

        Returns:
            BaseTransactionConfirmation: success with a transaction reference,
            or a failure status with ``error_message`` set.
        """
        pass
