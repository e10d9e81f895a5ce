"""
Proof Service
=============

Create, delete and enumerate identity proofs bound to a public key.

This service provides:
- ProofService: bind-then-modify orchestration over a proof client
- Read-only HTTP endpoints for proofs, bindings and proof chains

Version: 0.1.0
"""

__version__ = "0.1.0"
