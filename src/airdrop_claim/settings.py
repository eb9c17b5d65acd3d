"""
Process configuration for the claim server.

Values come from environment variables, optionally seeded from a ``.env``
file in the working directory. Everything except ``PRIVATE_KEY`` has a
default; ``PRIVATE_KEY`` is validated later by ``load_signer_account`` when
the disbursement adapter is built.
"""

import os
from typing import List, Optional, Tuple

import dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .adapters.evm.constants import (
    DEFAULT_TOKEN,
    DEFAULT_CHAIN_ID,
    DEFAULT_AMOUNT,
    DEFAULT_RPC_URL,
    DEFAULT_PORT,
)
from .adapters.evm.domains import DEFAULT_DOMAIN_NAMES
from .engine.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _split_csv(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class ClaimSettings(BaseModel):
    """
    Claim server settings.

    Attributes:
        token: ERC-20 token contract address, lower-cased.
        chain_id: Chain id claims are signed for and transfers are sent on.
        amount: Human-readable amount paid per claim (converted with the
            token's decimals at startup).
        rpc_url: JSON-RPC endpoint.
        port: HTTP listen port.
        cors_origins: Allowed CORS origins; ``["*"]`` allows any origin.
        private_key: Operator credential, hex key or mnemonic phrase.
        domain_names: Accepted EIP-712 domain names, in match order.
        rpc_timeout: RPC request timeout in seconds.
        wait_for_receipt: Wait for the transfer receipt before answering.
        log_level: Level passed to ``setup_logger``.
    """

    token: str = Field(default=DEFAULT_TOKEN.lower())
    chain_id: int = Field(default=DEFAULT_CHAIN_ID, gt=0)
    amount: str = Field(default=DEFAULT_AMOUNT)
    rpc_url: str = Field(default=DEFAULT_RPC_URL)
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    private_key: str = Field(default="", repr=False)
    domain_names: Tuple[str, ...] = Field(default=DEFAULT_DOMAIN_NAMES)
    rpc_timeout: int = Field(default=60, gt=0)
    wait_for_receipt: bool = False
    log_level: str = "INFO"

    @field_validator("token")
    @classmethod
    def _lower_token(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("domain_names")
    @classmethod
    def _require_domain_names(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one domain name is required")
        return value

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ClaimSettings":
        """
        Build settings from the process environment.

        Args:
            env_file: Optional ``.env`` path; defaults to searching the
                current directory. Existing environment variables win.

        Raises:
            ConfigurationError: If a value cannot be parsed.
        """
        dotenv.load_dotenv(env_file)

        values = {
            "token": os.getenv("TOKEN") or DEFAULT_TOKEN,
            "chain_id": os.getenv("CHAIN_ID") or DEFAULT_CHAIN_ID,
            "amount": os.getenv("AMOUNT") or DEFAULT_AMOUNT,
            "rpc_url": os.getenv("RPC_URL") or DEFAULT_RPC_URL,
            "port": os.getenv("PORT") or DEFAULT_PORT,
            "cors_origins": _split_csv(os.getenv("CORS_ORIGINS")) or ["*"],
            "private_key": os.getenv("PRIVATE_KEY", ""),
            "domain_names": tuple(_split_csv(os.getenv("CLAIM_DOMAIN_NAMES"))) or DEFAULT_DOMAIN_NAMES,
            "rpc_timeout": os.getenv("RPC_TIMEOUT") or 60,
            "wait_for_receipt": (os.getenv("WAIT_FOR_RECEIPT") or "").strip().lower() in _TRUE_VALUES,
            "log_level": os.getenv("LOG_LEVEL") or "INFO",
        }
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise ConfigurationError(f"Invalid configuration ({fields}): {e}") from e
