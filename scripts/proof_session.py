#!/usr/bin/env python3
"""
Proof Session Script
====================

Runs a create, verify, list and delete session against the mock proof
client and prints each step.

Usage:
    python scripts/proof_session.py --identity octocat --public-key 0x02ab...
    python scripts/proof_session.py --platform ethereum --identity 0xabc... \\
        --public-key 0x02ab... --keep
"""

import argparse
import asyncio
import base64
import hashlib
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.proof.service import ProofService
from shared.config import settings
from shared.logging import setup_logging
from shared.proof import MockProofClient, Platform, ProofExtra


def fake_signature(sign_payload: str, key: str) -> str:
    """Stand-in signature; the mock client records but never checks it."""
    digest = hashlib.sha256(f"{key}:{sign_payload}".encode()).digest()
    return base64.b64encode(digest).decode()


async def run_session(args: argparse.Namespace) -> int:
    """Run one session and return the exit code."""
    client = MockProofClient(page_size=args.page_size)
    service = ProofService(
        client=client,
        platform=Platform(args.platform),
        identity=args.identity,
        public_key=args.public_key,
    )

    def on_extra(sign_payload: str) -> ProofExtra:
        extra = ProofExtra(signature=fake_signature(sign_payload, args.public_key))
        if service.platform == Platform.ETHEREUM:
            extra.wallet_signature = fake_signature(sign_payload, args.identity)
        return extra

    health = await service.health()
    print(f"proof api: {health.hello} ({len(health.platforms)} platforms)")

    verification = await service.create_proof(on_extra=on_extra)
    print("publish this post:")
    print(verification.post_content.default)

    location = args.proof_location or f"{args.platform}-post-{args.identity}"
    await verification.verify(location)
    print(f"verified at {location}")

    for record in await service.all_existed_binding():
        platforms = ", ".join(f"{p.platform.value}:{p.identity}" for p in record.proofs)
        print(f"avatar {record.avatar}: {platforms}")

    if not args.keep:
        await service.delete_proof(on_extra=on_extra)
        print("deleted")

    for item in await service.all_proof_chain():
        print(f"chain {item.created_at} {item.action.value} {item.platform.value}:{item.identity}")

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a proof session against the mock client")
    parser.add_argument(
        "--platform",
        choices=[p.value for p in Platform],
        default=settings.proof.default_platform,
    )
    parser.add_argument("--identity", required=True)
    parser.add_argument("--public-key", required=True)
    parser.add_argument("--proof-location", default=None)
    parser.add_argument("--page-size", type=int, default=settings.proof.page_size)
    parser.add_argument("--keep", action="store_true", help="Skip the delete step")
    parser.add_argument("--log-level", default=settings.log_level.value)
    args = parser.parse_args()

    setup_logging(log_level=args.log_level, service_name="proof-session")

    return asyncio.run(run_session(args))


if __name__ == "__main__":
    sys.exit(main())
