import pytest

from airdrop_claim.engine.ledger import InMemoryNonceLedger
from airdrop_claim.servers.apps import ClaimServer
from airdrop_claim.settings import ClaimSettings

from test_mocks import (
    FakeDisbursementAdapter,
    MOCK_CHAIN_ID,
    MOCK_NOW,
    MOCK_TOKEN,
    make_deps,
)


@pytest.fixture
def ledger():
    return InMemoryNonceLedger()


@pytest.fixture
def fake_adapter():
    return FakeDisbursementAdapter()


@pytest.fixture
def deps(fake_adapter, ledger):
    return make_deps(adapter=fake_adapter, ledger=ledger)


@pytest.fixture
def settings():
    return ClaimSettings(token=MOCK_TOKEN, chain_id=MOCK_CHAIN_ID, amount="1000", cors_origins=["*"])


@pytest.fixture
def server(settings, fake_adapter, ledger):
    return ClaimServer(
        settings=settings,
        disbursement=fake_adapter,
        ledger=ledger,
        clock=lambda: MOCK_NOW,
    )
