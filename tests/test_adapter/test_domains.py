import pytest

from airdrop_claim.adapters.evm.domains import DomainResolver, DEFAULT_DOMAIN_NAMES


class TestDomainResolver:
    """Candidate signing domains."""

    def test_default_order(self):
        resolver = DomainResolver(chain_id=137)
        assert [d.name for d in resolver.candidates()] == ["NY Airdrop", "VEN Airdrop", "Airdrop", "Claim"]
        assert resolver.names == DEFAULT_DOMAIN_NAMES

    def test_shared_chain_id_and_version(self):
        for domain in DomainResolver(chain_id=80002).candidates():
            assert domain.chainId == 80002
            assert domain.version == "1"

    def test_duplicates_collapse_in_order(self):
        resolver = DomainResolver(chain_id=137, names=["Claim", "Airdrop", "Claim", ""])
        assert resolver.names == ("Claim", "Airdrop")

    def test_empty_names_rejected(self):
        with pytest.raises(ValueError):
            DomainResolver(chain_id=137, names=[])

    def test_candidates_are_stable(self):
        resolver = DomainResolver(chain_id=137)
        assert resolver.candidates() == resolver.candidates()
        assert "chain_id=137" in repr(resolver)
