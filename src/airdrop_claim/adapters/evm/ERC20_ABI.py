"""
Minimal ERC-20 ABI Module

Simplified ABI definitions for the three token calls the claim service
makes: reading ``symbol()`` and ``decimals()`` once at startup, and
``transfer(address,uint256)`` for every disbursement.

Usage:
    from ERC20_ABI import get_erc20_claim_abi

    contract = web3.eth.contract(address=token_address, abi=get_erc20_claim_abi())
"""

from typing import Dict, Any, List


def get_symbol_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ERC-20 ``symbol()``.

    Returns:
        List[Dict[str, Any]]: ABI for the symbol view function
    """
    return [
        {
            "name": "symbol",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "string"}],
        }
    ]


def get_decimals_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ERC-20 ``decimals()``.

    Returns:
        List[Dict[str, Any]]: ABI for the decimals view function
    """
    return [
        {
            "name": "decimals",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "uint8"}],
        }
    ]


def get_transfer_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ERC-20 ``transfer(to, amount)``.

    Returns:
        List[Dict[str, Any]]: ABI for the transfer function

    Example:
        contract = web3.eth.contract(address=token_address, abi=get_transfer_abi())
        tx = await contract.functions.transfer(recipient, amount).build_transaction({...})
    """
    return [
        {
            "name": "transfer",
            "type": "function",
            "stateMutability": "nonpayable",
            "inputs": [
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
        }
    ]


def get_erc20_claim_abi() -> List[Dict[str, Any]]:
    """Combined ABI covering ``symbol``, ``decimals`` and ``transfer``."""
    return get_symbol_abi() + get_decimals_abi() + get_transfer_abi()
