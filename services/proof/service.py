"""
Proof Service
=============

Binds a proof client to one platform identity and public key, and turns
create/delete intents into the bind-then-modify calls the proof API expects.

Version: 0.1.0
"""

import inspect
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from shared.logging import get_logger
from shared.proof import (
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
    ProofQueryResponse,
)

logger = get_logger(__name__)

T = TypeVar("T")

ExtraResult = ProofExtra | Mapping[str, Any] | None
OnExtra = Callable[[str], ExtraResult | Awaitable[ExtraResult]]


async def to_list(iterable: AsyncIterable[T]) -> tuple[T, ...]:
    """Drain an async iterable into a tuple."""
    return tuple([item async for item in iterable])


async def _resolve_extra(on_extra: OnExtra | None, sign_payload: str) -> ProofExtra | None:
    """Run the extra callback, sync or async, and coerce its result."""
    if on_extra is None:
        return None

    result = on_extra(sign_payload)
    if inspect.isawaitable(result):
        result = await result

    if result is None or isinstance(result, ProofExtra):
        return result
    return ProofExtra.model_validate(dict(result))


class ProofServiceOptions(BaseModel):
    """Construction options for ProofService."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    client: ProofClient
    platform: Platform
    identity: NonBlankStr
    public_key: NonBlankStr


@dataclass
class CreateProofVerification:
    """
    A create in progress.

    Publish ``post_content`` (after substituting the signature) where the
    platform can see it, then call ``verify`` with the post's location.
    """

    service: "ProofService"
    payload: BindProofPayload
    on_extra: OnExtra | None = field(default=None, repr=False)

    @property
    def post_content(self) -> PostContent:
        return self.payload.post_content

    async def verify(self, proof_location: str | None = None) -> None:
        """Submit the create modification for this payload."""
        await self.service.create_proof_modification(
            Action.CREATE,
            uuid=self.payload.uuid,
            created_at=self.payload.created_at,
            proof_location=proof_location,
            extra=await _resolve_extra(self.on_extra, self.payload.sign_payload),
        )


class ProofService:
    """
    Proof operations for one (platform, identity, public key).

    Example:
        >>> service = ProofService(
        ...     client=get_proof_client(),
        ...     platform=Platform.GITHUB,
        ...     identity="octocat",
        ...     public_key="0x02...",
        ... )
        >>> verification = await service.create_proof(on_extra=sign)
        >>> # publish verification.post_content, then
        >>> await verification.verify(gist_id)
    """

    def __init__(
        self,
        options: ProofServiceOptions | None = None,
        **kwargs: Any,
    ) -> None:
        if options is None:
            options = ProofServiceOptions(**kwargs)
        elif kwargs:
            raise TypeError(
                "ProofService takes either options or keyword arguments, not both"
            )

        self.client = options.client
        self.platform = options.platform
        self.identity = options.identity
        self.public_key = options.public_key

        self._logger = logger.bind(
            platform=self.platform.value,
            identity=self.identity,
        )

    def __repr__(self) -> str:
        return (
            f"ProofService(platform={self.platform.value!r}, "
            f"identity={self.identity!r}, public_key={self.public_key!r})"
        )

    @property
    def info(self) -> BaseInfo:
        return BaseInfo(
            platform=self.platform,
            identity=self.identity,
            public_key=self.public_key,
        )

    async def health(self) -> HealthStatus:
        return await self.client.health()

    async def get_proof(self) -> ProofQueryResponse:
        return await self.client.get_proof(self.info)

    async def bind_proof(self, action: Action) -> BindProofPayload:
        """Request a payload to sign for ``action``."""
        self._logger.debug("proof_bind_requested", action=action.value)
        return await self.client.bind_proof(
            BindProofRequest(
                platform=self.platform,
                identity=self.identity,
                public_key=self.public_key,
                action=action,
            )
        )

    async def create_proof_modification(
        self,
        action: Action,
        uuid: str,
        created_at: str,
        proof_location: str | None = None,
        extra: ProofExtra | None = None,
    ) -> None:
        """Submit a signed modification for a payload from ``bind_proof``."""
        await self.client.create_proof_modification(
            ProofModification(
                action=action,
                uuid=uuid,
                created_at=created_at,
                platform=self.platform,
                identity=self.identity,
                public_key=self.public_key,
                proof_location=proof_location,
                extra=extra,
            )
        )
        self._logger.info("proof_modification_submitted", action=action.value, uuid=uuid)

    async def create_proof(self, on_extra: OnExtra | None = None) -> CreateProofVerification:
        """
        Start binding this identity to the public key.

        Args:
            on_extra: Called with the sign payload when verifying; returns
                the signatures to attach (sync or async)

        Returns:
            CreateProofVerification carrying the post content and ``verify``
        """
        payload = await self.bind_proof(Action.CREATE)
        return CreateProofVerification(service=self, payload=payload, on_extra=on_extra)

    async def delete_proof(self, on_extra: OnExtra | None = None) -> None:
        """
        Unbind this identity from the public key.

        Args:
            on_extra: Called with the sign payload; returns the signatures
                to attach (sync or async)
        """
        payload = await self.bind_proof(Action.DELETE)
        await self.create_proof_modification(
            Action.DELETE,
            uuid=payload.uuid,
            created_at=payload.created_at,
            proof_location=None,
            extra=await _resolve_extra(on_extra, payload.sign_payload),
        )

    # =========================================================================
    # Existing Bindings
    # =========================================================================

    def iter_existed_binding(self) -> AsyncIterator[IdentityRecord]:
        return self.client.iter_existed_binding(self.platform, [self.identity])

    async def all_existed_binding(self) -> tuple[IdentityRecord, ...]:
        return await to_list(self.iter_existed_binding())

    # =========================================================================
    # Proof Chain
    # =========================================================================

    def iter_proof_chain(self) -> AsyncIterator[ProofChainItem]:
        return self.client.iter_proof_chain(self.public_key)

    async def all_proof_chain(self) -> tuple[ProofChainItem, ...]:
        return await to_list(self.iter_proof_chain())
