"""
EVM Claim Configuration Constants

Default deployment values, unit conversion between human-readable token
amounts and base units, and loading of the operator signing account.
"""

import re
from decimal import Decimal, InvalidOperation, localcontext

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ...engine.exceptions import ConfigurationError

#: Token paid out when ``TOKEN`` is not configured.
DEFAULT_TOKEN: str = "0xaD6a4F5AF2dAddE7801EAbEa764A7D4cF0EF7Cb3"

#: Polygon PoS mainnet.
DEFAULT_CHAIN_ID: int = 137

#: Human-readable amount paid per claim.
DEFAULT_AMOUNT: str = "1000"

DEFAULT_RPC_URL: str = "https://polygon-rpc.com"

DEFAULT_PORT: int = 8787

#: Fallbacks used when the token contract does not answer ``symbol()`` / ``decimals()``.
FALLBACK_SYMBOL: str = "TKN"
FALLBACK_DECIMALS: int = 18

_HEX_PRIVATE_KEY = re.compile(r"^0x[0-9a-fA-F]{64}$")

#: Minimum number of words in an accepted BIP-39 mnemonic.
_MIN_MNEMONIC_WORDS = 12


def is_hex_private_key(value: str) -> bool:
    """True for a 0x-prefixed 32-byte hex private key."""
    return bool(_HEX_PRIVATE_KEY.match(value or ""))


def load_signer_account(credential: str) -> LocalAccount:
    """
    Build the operator account from a raw private key or a mnemonic phrase.

    Exactly one of the two forms is accepted:

    * ``0x`` followed by 64 hex digits -- a raw secp256k1 private key.
    * twelve or more whitespace-separated words -- a BIP-39 mnemonic, derived
      along the default Ethereum path ``m/44'/60'/0'/0/0``.

    Args:
        credential: Value of the ``PRIVATE_KEY`` setting.

    Returns:
        ``LocalAccount`` able to sign transactions.

    Raises:
        ConfigurationError: If the credential matches neither form, or the
            mnemonic fails its checksum.
    """
    raw = (credential or "").strip()

    if is_hex_private_key(raw):
        return Account.from_key(raw)

    if len(raw.split()) >= _MIN_MNEMONIC_WORDS:
        Account.enable_unaudited_hdwallet_features()
        try:
            return Account.from_mnemonic(" ".join(raw.split()))
        except Exception as e:
            raise ConfigurationError(f"PRIVATE_KEY mnemonic is invalid: {e}") from e

    raise ConfigurationError(
        "PRIVATE_KEY is invalid. Expected 0x + 64 hex or a 12/24-word phrase."
    )


def amount_to_value(*, amount: float | int | str | Decimal, decimals: int) -> int:
    """Convert a human-readable token `amount` into smallest-unit integer `value`.

    Args:
        amount: Human-readable amount (e.g. "1000" or 1.5). Accepts float/int/str/Decimal.
        decimals: Token decimals (e.g. 18).

    Returns:
        int: Smallest-unit integer value.

    Raises:
        ValueError: If inputs are invalid or the amount cannot be represented in smallest units.
    """
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")

    try:
        # str() avoids binary-float artifacts (0.1 -> 0.1000000000000000055...)
        dec_amount = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e

    if not dec_amount.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")

    if dec_amount < 0:
        raise ValueError("amount must be non-negative")

    with localcontext() as ctx:
        ctx.prec = 120
        scaled = dec_amount * (Decimal(10) ** decimals)

    # Require exact smallest-unit representability (no fractional smallest units)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"amount {amount!r} is not representable with decimals={decimals} "
            f"(would create fractional smallest units)"
        )

    return int(scaled)
