"""
Proof Client Interface
======================

Abstract base class and wire models for the proof-verification API.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from shared.config import ProofClientMode, settings
from shared.logging import get_logger

logger = get_logger(__name__)


class Platform(str, Enum):
    """Platforms a public key can be bound to."""

    NEXTID = "nextid"
    GITHUB = "github"
    TWITTER = "twitter"
    KEYBASE = "keybase"
    ETHEREUM = "ethereum"
    DISCORD = "discord"
    DOTBIT = "dotbit"
    SOLANA = "solana"
    MINDS = "minds"


class Action(str, Enum):
    """Proof modification action."""

    CREATE = "create"
    DELETE = "delete"


# Rejects empty and whitespace-only values.
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# Platforms proven by publishing a post; the post's location is the proof.
POST_PLATFORMS = frozenset(
    {
        Platform.GITHUB,
        Platform.TWITTER,
        Platform.KEYBASE,
        Platform.DISCORD,
        Platform.MINDS,
    }
)


class BaseInfo(BaseModel):
    """Identity context shared by every proof request."""

    platform: Platform
    identity: NonBlankStr = Field(..., description="Identity on the platform")
    public_key: NonBlankStr = Field(..., description="Avatar public key (hex)")


class ProofExtra(BaseModel):
    """Platform-specific signatures attached to a modification."""

    model_config = ConfigDict(extra="allow")

    signature: str | None = Field(default=None, description="Avatar signature (base64)")
    wallet_signature: str | None = Field(
        default=None,
        description="Wallet signature (base64), ethereum only",
    )


class BindProofRequest(BaseInfo):
    """Request for a payload to sign and publish."""

    action: Action
    extra: ProofExtra | None = None


class PostContent(BaseModel):
    """Localized post text with a ``%SIG_BASE64%`` placeholder."""

    default: str
    en_US: str | None = None
    zh_CN: str | None = None


class BindProofPayload(BaseModel):
    """Payload returned by bind_proof."""

    post_content: PostContent
    sign_payload: str
    uuid: str
    created_at: str = Field(..., description="Unix timestamp (seconds) as a string")


class ProofModification(BaseInfo):
    """A signed create or delete submitted for a previously issued payload."""

    action: Action
    uuid: str
    created_at: str
    proof_location: str | None = None
    extra: ProofExtra | None = None


class ProofRecord(BaseModel):
    """One verified platform identity."""

    platform: Platform
    identity: str
    created_at: str
    last_checked_at: str
    is_valid: bool = True
    invalid_reason: str = ""


class IdentityRecord(BaseModel):
    """An avatar and every proof bound to it."""

    avatar: str
    proofs: list[ProofRecord] = Field(default_factory=list)


class ProofPagination(BaseModel):
    """Pagination block of a proof query."""

    total: int = 0
    per: int = 20
    current: int = 1
    next: int = 0


class ProofQueryResponse(BaseModel):
    """Result of a proof query."""

    pagination: ProofPagination = Field(default_factory=ProofPagination)
    ids: list[IdentityRecord] = Field(default_factory=list)


class ProofChainItem(BaseModel):
    """One link in a public key's modification history."""

    action: Action
    platform: Platform
    identity: str
    proof_location: str | None = None
    created_at: str
    signature: str = ""
    signature_body: str = ""
    uuid: str
    extra: dict[str, Any] = Field(default_factory=dict)
    arweave_id: str = ""


class HealthStatus(BaseModel):
    """Proof API health document."""

    hello: str
    platforms: list[str] = Field(default_factory=list)


class ProofClient(ABC):
    """
    Abstract base class for proof API clients.

    Transport, retries, pagination and signature checks belong to the
    implementation.
    """

    @property
    @abstractmethod
    def mode(self) -> ProofClientMode:
        """Get the client mode."""
        ...

    @abstractmethod
    async def health(self) -> HealthStatus:
        """Check proof API health."""
        ...

    @abstractmethod
    async def get_proof(self, info: BaseInfo) -> ProofQueryResponse:
        """
        Query the avatars holding a platform identity.

        Args:
            info: Platform, identity and public key to look up

        Returns:
            ProofQueryResponse with matching identity records
        """
        ...

    @abstractmethod
    async def bind_proof(self, request: BindProofRequest) -> BindProofPayload:
        """
        Request a payload to sign for a create or delete.

        Args:
            request: Identity context and action

        Returns:
            BindProofPayload to sign (and publish, for post platforms)
        """
        ...

    @abstractmethod
    async def create_proof_modification(self, modification: ProofModification) -> None:
        """
        Submit a signed modification.

        Args:
            modification: The signed create or delete

        Raises:
            ProofClientError: If the proof API rejects the modification
        """
        ...

    @abstractmethod
    def iter_existed_binding(
        self,
        platform: Platform,
        identity: list[str],
    ) -> AsyncIterator[IdentityRecord]:
        """
        Iterate every avatar bound to any of the given identities.

        Args:
            platform: Platform the identities live on
            identity: Identities to look up

        Returns:
            Async iterator of IdentityRecords across all pages
        """
        ...

    @abstractmethod
    def iter_proof_chain(self, public_key: str) -> AsyncIterator[ProofChainItem]:
        """
        Iterate a public key's proof chain, oldest first.

        Args:
            public_key: Avatar public key

        Returns:
            Async iterator of ProofChainItems across all pages
        """
        ...


# Global client instance
_client: ProofClient | None = None


def get_proof_client() -> ProofClient:
    """
    Get the configured proof client instance.

    Returns:
        ProofClient instance based on settings
    """
    global _client

    if _client is None:
        mode = settings.proof.client_mode

        if mode == ProofClientMode.MOCK:
            from shared.proof.mock import MockProofClient

            _client = MockProofClient()
        elif mode in (ProofClientMode.STAGING, ProofClientMode.PRODUCTION):
            raise NotImplementedError(
                f"Proof client mode '{mode.value}' has no built-in client. "
                "Inject one with set_proof_client() or use PROOF_CLIENT_MODE=mock."
            )
        else:
            raise ValueError(f"Unknown proof client mode: {mode}")

        logger.info(
            "proof_client_initialized",
            mode=mode.value,
        )

    return _client


def set_proof_client(client: ProofClient) -> None:
    """
    Set a custom proof client.

    Args:
        client: ProofClient instance
    """
    global _client
    _client = client
    logger.info(
        "proof_client_set",
        mode=client.mode.value,
    )


def reset_proof_client() -> None:
    """Reset the client to be re-initialized."""
    global _client
    _client = None
