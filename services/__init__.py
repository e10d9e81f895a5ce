"""
ProofBind Services
==================

Services built on the shared proof client.

Services:
- proof: create/delete orchestration and read-only proof endpoints
"""

__all__ = [
    "proof",
]
