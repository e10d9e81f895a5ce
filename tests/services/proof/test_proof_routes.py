"""
Proof Routes Tests
==================

Tests for the proof service HTTP endpoints.

Version: 0.1.0
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import status
from httpx import AsyncClient

from services.proof.service import ProofService
from shared.proof import MockProofClient, Platform, ProofClientError, ProofExtra


async def bind_github(client: MockProofClient, public_key: str, identity: str = "octocat") -> None:
    """Bind a github identity through the service."""
    service = ProofService(
        client=client,
        platform=Platform.GITHUB,
        identity=identity,
        public_key=public_key,
    )
    verification = await service.create_proof(on_extra=lambda _: ProofExtra(signature="c2ln"))
    await verification.verify(f"gist-{identity}")


class TestHealth:
    """Tests for health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, proof_api_client: AsyncClient) -> None:
        """Test health reports the proof API component."""
        response = await proof_api_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "proof"
        assert "github" in body["components"]["proof_api"]["platforms"]

    @pytest.mark.asyncio
    async def test_health_degraded(
        self, proof_api_client: AsyncClient, mock_client: MockProofClient
    ) -> None:
        """Test a failing proof API degrades health."""
        mock_client.health = AsyncMock(side_effect=ProofClientError("unreachable", 503))

        response = await proof_api_client.get("/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["components"]["proof_api"]["error"] == "unreachable"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, proof_api_client: AsyncClient) -> None:
        """Test the request id header round trips."""
        response = await proof_api_client.get("/", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"


class TestProofEndpoints:
    """Tests for proof lookups."""

    @pytest.mark.asyncio
    async def test_get_proof(
        self,
        proof_api_client: AsyncClient,
        mock_client: MockProofClient,
        public_key: str,
    ) -> None:
        """Test looking up a bound identity."""
        await bind_github(mock_client, public_key)

        response = await proof_api_client.get(
            "/api/v1/proofs/github/octocat",
            params={"public_key": public_key},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["ids"][0]["avatar"] == public_key

    @pytest.mark.asyncio
    async def test_get_proof_requires_public_key(self, proof_api_client: AsyncClient) -> None:
        """Test the public key query parameter is required."""
        response = await proof_api_client.get("/api/v1/proofs/github/octocat")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("path", "key"),
        [
            ("/api/v1/proofs/github/%20", "0x02"),
            ("/api/v1/proofs/github/octocat", " "),
            ("/api/v1/proofs/github/%20/bindings", " "),
        ],
    )
    async def test_blank_values_rejected(
        self, proof_api_client: AsyncClient, path: str, key: str
    ) -> None:
        """Test whitespace-only identity or key is a client error."""
        response = await proof_api_client.get(path, params={"public_key": key})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("Blank value for:")

    @pytest.mark.asyncio
    async def test_unknown_platform(self, proof_api_client: AsyncClient, public_key: str) -> None:
        """Test an unsupported platform is rejected."""
        response = await proof_api_client.get(
            "/api/v1/proofs/myspace/tom",
            params={"public_key": public_key},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_list_bindings_all_pages(
        self, proof_api_client: AsyncClient, mock_client: MockProofClient
    ) -> None:
        """Test bindings span every page of the client."""
        for i in range(3):
            await bind_github(mock_client, f"0x02{i:064x}")

        response = await proof_api_client.get(
            "/api/v1/proofs/github/octocat/bindings",
            params={"public_key": "0x0200"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total"] == 3
        assert body["platform"] == "github"
        assert len(body["bindings"]) == 3

    @pytest.mark.asyncio
    async def test_get_proof_chain(
        self,
        proof_api_client: AsyncClient,
        mock_client: MockProofClient,
        public_key: str,
    ) -> None:
        """Test the chain lists each modification."""
        await bind_github(mock_client, public_key, identity="octocat")
        await bind_github(mock_client, public_key, identity="hubot")

        response = await proof_api_client.get(
            "/api/v1/proofs/github/octocat/chain",
            params={"public_key": public_key},
        )

        body = response.json()
        assert body["public_key"] == public_key
        assert body["total"] == 2
        assert [item["identity"] for item in body["items"]] == ["octocat", "hubot"]

    @pytest.mark.asyncio
    async def test_client_error_mapped(
        self,
        proof_api_client: AsyncClient,
        mock_client: MockProofClient,
        public_key: str,
    ) -> None:
        """Test proof client errors keep their status code."""
        mock_client.get_proof = AsyncMock(side_effect=ProofClientError("rate limited", 429))

        response = await proof_api_client.get(
            "/api/v1/proofs/github/octocat",
            params={"public_key": public_key},
        )

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "rate limited"
        assert body["error_code"] == "ProofClientError"
