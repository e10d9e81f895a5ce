"""
Mock Proof Client
=================

In-memory proof API for development and testing.

Version: 0.1.0
"""

import hashlib
import json
import time
import uuid
from collections.abc import AsyncIterator

from shared.config import ProofClientMode, settings
from shared.logging import get_logger
from shared.proof.client import (
    POST_PLATFORMS,
    Action,
    BaseInfo,
    BindProofPayload,
    BindProofRequest,
    HealthStatus,
    IdentityRecord,
    Platform,
    PostContent,
    ProofChainItem,
    ProofClient,
    ProofModification,
    ProofPagination,
    ProofQueryResponse,
    ProofRecord,
)
from shared.proof.errors import (
    ProofNotFoundError,
    ProofPayloadMismatchError,
    ProofValidationError,
)

logger = get_logger(__name__)

PendingKey = tuple[Action, Platform, str, str]


class MockProofClient(ProofClient):
    """
    In-memory mock proof client.

    Issues payloads, accepts modifications that match them and keeps
    bindings and proof chains per public key. Signatures are recorded,
    never checked.

    Data is stored in memory and lost on restart.
    """

    def __init__(self, page_size: int | None = None) -> None:
        """Initialize mock client with in-memory storage."""
        self.page_size = page_size if page_size is not None else settings.proof.page_size
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")

        # Payloads issued by bind_proof and not yet consumed
        self._pending: dict[PendingKey, BindProofPayload] = {}

        # public_key -> (platform, identity) -> record
        self._bindings: dict[str, dict[tuple[Platform, str], ProofRecord]] = {}

        # public_key -> chain, oldest first
        self._chains: dict[str, list[ProofChainItem]] = {}

        logger.debug("mock_proof_client_initialized", page_size=self.page_size)

    @property
    def mode(self) -> ProofClientMode:
        return ProofClientMode.MOCK

    async def health(self) -> HealthStatus:
        """Report mock health and supported platforms."""
        return HealthStatus(
            hello="proof service",
            platforms=[p.value for p in Platform],
        )

    @staticmethod
    def _now() -> str:
        return str(int(time.time()))

    @staticmethod
    def _pending_key(action: Action, info: BaseInfo) -> PendingKey:
        return (action, info.platform, info.identity, info.public_key)

    def _build_post_content(self, request: BindProofRequest) -> PostContent:
        platform = request.platform.value
        return PostContent(
            default=(
                f"Verifying my {platform} ID {request.identity} "
                f"with avatar {request.public_key}.\nSig: %SIG_BASE64%"
            ),
            en_US=(
                f"Verifying my {platform} ID {request.identity} "
                f"with avatar {request.public_key}.\nSig: %SIG_BASE64%"
            ),
            zh_CN=(
                f"验证我的 {platform} 帐号 {request.identity}, "
                f"头像 {request.public_key}.\nSig: %SIG_BASE64%"
            ),
        )

    def _records_for(self, platform: Platform, identities: set[str]) -> list[IdentityRecord]:
        """Collect avatars bound to any of the identities on a platform."""
        records = []
        for avatar, proofs in self._bindings.items():
            if any((platform, identity) in proofs for identity in identities):
                records.append(
                    IdentityRecord(avatar=avatar, proofs=list(proofs.values()))
                )
        return records

    # =========================================================================
    # Proof Queries
    # =========================================================================

    async def get_proof(self, info: BaseInfo) -> ProofQueryResponse:
        """Return the first page of avatars holding the identity."""
        records = self._records_for(info.platform, {info.identity})
        page = records[: self.page_size]

        return ProofQueryResponse(
            pagination=ProofPagination(
                total=len(records),
                per=self.page_size,
                current=1,
                next=2 if len(records) > self.page_size else 0,
            ),
            ids=page,
        )

    async def iter_existed_binding(
        self,
        platform: Platform,
        identity: list[str],
    ) -> AsyncIterator[IdentityRecord]:
        """Walk every page of avatars bound to the identities."""
        records = self._records_for(platform, set(identity))

        for start in range(0, len(records), self.page_size):
            page = records[start : start + self.page_size]
            logger.debug(
                "mock_binding_page",
                platform=platform.value,
                page=start // self.page_size + 1,
                count=len(page),
            )
            for record in page:
                yield record

    async def iter_proof_chain(self, public_key: str) -> AsyncIterator[ProofChainItem]:
        """Walk every page of a public key's proof chain."""
        chain = list(self._chains.get(public_key, []))

        for start in range(0, len(chain), self.page_size):
            page = chain[start : start + self.page_size]
            logger.debug(
                "mock_chain_page",
                page=start // self.page_size + 1,
                count=len(page),
            )
            for item in page:
                yield item

    # =========================================================================
    # Proof Modifications
    # =========================================================================

    async def bind_proof(self, request: BindProofRequest) -> BindProofPayload:
        """Issue a payload for the requester to sign."""
        chain = self._chains.get(request.public_key, [])
        created_at = self._now()
        payload_uuid = str(uuid.uuid4())

        sign_payload = json.dumps(
            {
                "action": request.action.value,
                "created_at": created_at,
                "identity": request.identity,
                "platform": request.platform.value,
                "prev": chain[-1].signature if chain else None,
                "uuid": payload_uuid,
            },
            sort_keys=True,
        )

        payload = BindProofPayload(
            post_content=self._build_post_content(request),
            sign_payload=sign_payload,
            uuid=payload_uuid,
            created_at=created_at,
        )
        self._pending[self._pending_key(request.action, request)] = payload

        logger.debug(
            "mock_proof_payload_issued",
            action=request.action.value,
            platform=request.platform.value,
            identity=request.identity,
            uuid=payload_uuid,
        )

        return payload

    def _validate(self, modification: ProofModification) -> None:
        extra = modification.extra

        if modification.action == Action.DELETE:
            if extra is None or not extra.signature:
                raise ProofValidationError("delete requires extra.signature")
            return

        if modification.platform in POST_PLATFORMS and not modification.proof_location:
            raise ProofValidationError(
                f"{modification.platform.value} proofs require proof_location"
            )
        if modification.platform == Platform.ETHEREUM and (
            extra is None or not extra.wallet_signature or not extra.signature
        ):
            raise ProofValidationError(
                "ethereum proofs require extra.wallet_signature and extra.signature"
            )

    async def create_proof_modification(self, modification: ProofModification) -> None:
        """Apply a create or delete that matches an issued payload."""
        key = self._pending_key(modification.action, modification)
        pending = self._pending.get(key)

        if (
            pending is None
            or pending.uuid != modification.uuid
            or pending.created_at != modification.created_at
        ):
            raise ProofPayloadMismatchError(
                f"no matching payload for uuid {modification.uuid}"
            )

        self._validate(modification)

        bindings = self._bindings.setdefault(modification.public_key, {})
        binding_key = (modification.platform, modification.identity)

        if modification.action == Action.DELETE:
            if binding_key not in bindings:
                raise ProofNotFoundError(
                    f"{modification.platform.value} identity "
                    f"{modification.identity} is not bound"
                )
            del bindings[binding_key]
        else:
            now = self._now()
            bindings[binding_key] = ProofRecord(
                platform=modification.platform,
                identity=modification.identity,
                created_at=modification.created_at,
                last_checked_at=now,
            )

        del self._pending[key]

        extra = modification.extra.model_dump(exclude_none=True) if modification.extra else {}
        signature = extra.pop("signature", "")
        self._chains.setdefault(modification.public_key, []).append(
            ProofChainItem(
                action=modification.action,
                platform=modification.platform,
                identity=modification.identity,
                proof_location=modification.proof_location,
                created_at=modification.created_at,
                signature=signature,
                signature_body=pending.sign_payload,
                uuid=modification.uuid,
                extra=extra,
                arweave_id=hashlib.sha256(pending.sign_payload.encode()).hexdigest()[:43],
            )
        )

        logger.info(
            "mock_proof_modified",
            action=modification.action.value,
            platform=modification.platform.value,
            identity=modification.identity,
            uuid=modification.uuid,
        )

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def clear_all(self) -> None:
        """Clear all mock data (for testing)."""
        self._pending.clear()
        self._bindings.clear()
        self._chains.clear()
        logger.debug("mock_proof_client_cleared")

    def get_stats(self) -> dict[str, int]:
        """Get storage statistics."""
        return {
            "pending": len(self._pending),
            "avatars": sum(1 for proofs in self._bindings.values() if proofs),
            "bindings": sum(len(proofs) for proofs in self._bindings.values()),
            "chain_items": sum(len(chain) for chain in self._chains.values()),
        }
