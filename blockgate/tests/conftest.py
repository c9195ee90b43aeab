"""
Pytest configuration and fixtures for blockgate tests.
"""

import pytest
import responses
from fastapi.testclient import TestClient

from blockgate.app import blockchain
from blockgate.app.blockchain import BlockchainClient, BlockSource, get_client
from blockgate.app.main import app
from blockgate.app.schemas import Block
from blockgate.tests.helpers import RPC_URL, TX_HASHES


# =============================================================================
# Fake Block Source
# =============================================================================

class FakeBlockSource(BlockSource):
    """In-memory BlockSource that records the calls it receives."""

    def __init__(self):
        self.rpc_url = "fake://node"
        self.block_number = "0x1234567"
        self.block = None
        self.error = None
        self.calls = []

    def get_latest_block_number(self) -> str:
        self.calls.append(("eth_blockNumber",))
        if self.error is not None:
            raise self.error
        return self.block_number

    def get_block_by_number(self, block_number: str, full_transactions: bool) -> Block:
        self.calls.append(("eth_getBlockByNumber", block_number, full_transactions))
        if self.error is not None:
            raise self.error
        if self.block is not None:
            return self.block
        return Block(
            number=block_number,
            hash="0xabcdef1234567890",
            parent_hash="0x1234567890abcdef",
            nonce="0x123456",
            timestamp="0x60123456",
            transactions=list(TX_HASHES),
            transaction_count=len(TX_HASHES),
        )


# =============================================================================
# Pytest Fixtures
# =============================================================================

@pytest.fixture
def fake_source():
    """Fake block source injected into the app."""
    source = FakeBlockSource()
    app.dependency_overrides[get_client] = lambda: source
    yield source
    app.dependency_overrides.pop(get_client, None)


@pytest.fixture
def api_client(fake_source):
    """FastAPI test client backed by the fake block source."""
    return TestClient(app)


@pytest.fixture
def rpc_client():
    """Real blockchain client pointed at the mocked upstream."""
    return BlockchainClient(rpc_url=RPC_URL, timeout=5)


@pytest.fixture
def upstream_api_client(rpc_client):
    """FastAPI test client whose requests reach the mocked upstream."""
    app.dependency_overrides[get_client] = lambda: rpc_client
    yield TestClient(app)
    app.dependency_overrides.pop(get_client, None)


@pytest.fixture
def mock_upstream():
    """Mock upstream RPC node."""
    with responses.RequestsMock() as rsps:
        yield rsps


# =============================================================================
# Environment Variables
# =============================================================================

@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
    """Set test environment variables and drop any cached client."""
    monkeypatch.setenv("BLOCKCHAIN_RPC_URL", RPC_URL)
    monkeypatch.delenv("BLOCKCHAIN_RPC_TIMEOUT", raising=False)
    monkeypatch.delenv("API_PORT", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setattr(blockchain, "_client", None)
