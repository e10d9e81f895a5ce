"""
Test Configuration
==================

Pytest fixtures for ProofBind tests.
"""

import os
from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["PROOF_CLIENT_MODE"] = "mock"

from shared.proof import MockProofClient, reset_proof_client, set_proof_client  # noqa: E402


PUBLIC_KEY = "0x028c3cc9947d6b8e4d3aa8b7f5d0c6b2e9f1a4c7d3e5b8a1f6c2d9e4b7a3c5f1e8"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def public_key() -> str:
    """Avatar public key used across tests."""
    return PUBLIC_KEY


@pytest.fixture
def mock_client() -> Iterator[MockProofClient]:
    """Fresh mock proof client installed as the global client."""
    client = MockProofClient(page_size=2)
    set_proof_client(client)
    yield client
    reset_proof_client()


@pytest_asyncio.fixture
async def proof_api_client(mock_client: MockProofClient) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Proof Service."""
    from services.proof.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
