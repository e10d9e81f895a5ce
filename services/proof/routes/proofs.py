"""
Proof Routes
============

Read-only endpoints over the proof service.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ValidationError

from services.proof.service import ProofService
from shared.logging import get_logger
from shared.proof import (
    IdentityRecord,
    Platform,
    ProofChainItem,
    ProofQueryResponse,
    get_proof_client,
)


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class BindingListResponse(BaseModel):
    """Avatars bound to an identity."""

    platform: Platform
    identity: str
    bindings: list[IdentityRecord]
    total: int


class ProofChainResponse(BaseModel):
    """A public key's proof chain."""

    public_key: str
    items: list[ProofChainItem]
    total: int


# ============================================================================
# Dependencies
# ============================================================================


def get_proof_service(
    platform: Platform,
    identity: str,
    public_key: str = Query(..., min_length=1, description="Avatar public key"),
) -> ProofService:
    """Build a proof service for the path identity."""
    try:
        return ProofService(
            client=get_proof_client(),
            platform=platform,
            identity=identity,
            public_key=public_key,
        )
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors()})
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Blank value for: {', '.join(fields)}",
        ) from e


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/{platform}/{identity}", response_model=ProofQueryResponse)
async def get_proof(
    service: ProofService = Depends(get_proof_service),
) -> ProofQueryResponse:
    """
    Look up the avatars holding a platform identity.

    Returns:
        ProofQueryResponse from the proof API
    """
    logger.info(
        "get_proof",
        platform=service.platform.value,
        identity=service.identity,
    )
    return await service.get_proof()


@router.get("/{platform}/{identity}/bindings", response_model=BindingListResponse)
async def list_bindings(
    service: ProofService = Depends(get_proof_service),
) -> BindingListResponse:
    """
    List every avatar bound to a platform identity, across all pages.

    Returns:
        BindingListResponse
    """
    bindings = await service.all_existed_binding()

    logger.info(
        "list_bindings",
        platform=service.platform.value,
        identity=service.identity,
        total=len(bindings),
    )

    return BindingListResponse(
        platform=service.platform,
        identity=service.identity,
        bindings=list(bindings),
        total=len(bindings),
    )


@router.get("/{platform}/{identity}/chain", response_model=ProofChainResponse)
async def get_proof_chain(
    service: ProofService = Depends(get_proof_service),
) -> ProofChainResponse:
    """
    Get the full proof chain of the requested public key.

    Returns:
        ProofChainResponse, oldest first
    """
    items = await service.all_proof_chain()

    logger.info("get_proof_chain", total=len(items))

    return ProofChainResponse(
        public_key=service.public_key,
        items=list(items),
        total=len(items),
    )
