"""
Proof Module
============

Client abstraction for the proof-verification API.

Supports:
- Mock (development/testing)
- Injected clients for staging/production

Usage:
    from shared.proof import BindProofRequest, get_proof_client

    client = get_proof_client()
    payload = await client.bind_proof(
        BindProofRequest(
            action="create",
            platform="github",
            identity="octocat",
            public_key="0x02...",
        )
    )
"""

from shared.proof.client import (
    POST_PLATFORMS,
    Action,
    BaseInfo,
    BindProofPayload,
    BindProofRequest,
    HealthStatus,
    IdentityRecord,
    NonBlankStr,
    Platform,
    PostContent,
    ProofChainItem,
    ProofClient,
    ProofExtra,
    ProofModification,
    ProofPagination,
    ProofQueryResponse,
    ProofRecord,
    get_proof_client,
    reset_proof_client,
    set_proof_client,
)
from shared.proof.errors import (
    ProofClientError,
    ProofError,
    ProofNotFoundError,
    ProofPayloadMismatchError,
    ProofValidationError,
)
from shared.proof.mock import MockProofClient

__all__ = [
    # Client
    "ProofClient",
    "get_proof_client",
    "set_proof_client",
    "reset_proof_client",
    # Models
    "POST_PLATFORMS",
    "Action",
    "BaseInfo",
    "BindProofPayload",
    "BindProofRequest",
    "HealthStatus",
    "IdentityRecord",
    "NonBlankStr",
    "Platform",
    "PostContent",
    "ProofChainItem",
    "ProofExtra",
    "ProofModification",
    "ProofPagination",
    "ProofQueryResponse",
    "ProofRecord",
    # Errors
    "ProofError",
    "ProofClientError",
    "ProofNotFoundError",
    "ProofPayloadMismatchError",
    "ProofValidationError",
    # Implementations
    "MockProofClient",
]
