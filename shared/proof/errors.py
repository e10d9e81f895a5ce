"""
Proof Errors
============

Exceptions raised by proof clients and propagated through the proof service.
"""


class ProofError(Exception):
    """Base class for proof errors."""


class ProofClientError(ProofError):
    """The proof client rejected a request."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ProofValidationError(ProofClientError):
    """A proof request is missing required fields."""

    status_code = 422


class ProofPayloadMismatchError(ProofClientError):
    """A modification does not match a payload issued by bind_proof."""

    status_code = 409


class ProofNotFoundError(ProofClientError):
    """The binding being modified does not exist."""

    status_code = 404
