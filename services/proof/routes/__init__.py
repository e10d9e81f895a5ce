"""
Proof Service Routes
====================

API route handlers for the proof service.
"""

from services.proof.routes import proofs


__all__ = ["proofs"]
