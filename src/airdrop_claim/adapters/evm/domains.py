"""
Accepted EIP-712 signing domains for claims.

Deployed front-ends name the claim domain inconsistently. Instead of matching
names loosely, the operator maintains a closed, ordered list of accepted
names; every candidate shares the configured chain id and version, so the
relaxation never widens the chain or version a signature is valid for.
"""

from typing import Iterable, List, Sequence, Tuple

from .standards import EIP712Domain

#: Domain names used by the known claim front-ends, in match order.
DEFAULT_DOMAIN_NAMES: Tuple[str, ...] = ("NY Airdrop", "VEN Airdrop", "Airdrop", "Claim")

#: Domain version every accepted front-end signs with.
DEFAULT_DOMAIN_VERSION: str = "1"


class DomainResolver:
    """Enumerates the candidate signing domains for one chain id and version.

    Example::

        resolver = DomainResolver(chain_id=137)
        [d.name for d in resolver.candidates()]
        # ['NY Airdrop', 'VEN Airdrop', 'Airdrop', 'Claim']
    """

    def __init__(
        self,
        chain_id: int,
        version: str = DEFAULT_DOMAIN_VERSION,
        names: Iterable[str] = DEFAULT_DOMAIN_NAMES,
    ):
        # Order is preserved; duplicates collapse onto their first position.
        unique: List[str] = []
        for name in names:
            if name and name not in unique:
                unique.append(name)
        if not unique:
            raise ValueError("At least one accepted domain name is required")

        self.chain_id = int(chain_id)
        self.version = str(version)
        self._domains: Tuple[EIP712Domain, ...] = tuple(
            EIP712Domain(name=name, version=self.version, chainId=self.chain_id)
            for name in unique
        )

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(domain.name for domain in self._domains)

    def candidates(self) -> Sequence[EIP712Domain]:
        """Return the accepted domains in deterministic match order."""
        return self._domains

    def __repr__(self) -> str:
        return f"DomainResolver(chain_id={self.chain_id}, version={self.version!r}, names={list(self.names)})"
