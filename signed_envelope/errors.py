"""Exceptions raised by envelopes and identity services."""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base error for envelope operations."""


class InvalidInputKind(EnvelopeError, TypeError):
    """Envelope constructed from something other than a dict, string or ``None``."""

    def __init__(self, kind: type, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(
            message
            or f"Must provide message as dict or url-encoded string, got {kind.__name__}"
        )


class MissingService(EnvelopeError):
    """``sign``/``verify`` called without an identity service."""

    def __init__(self) -> None:
        super().__init__("Missing required identity service instance")


class MissingSignature(EnvelopeError):
    """Verification attempted on an envelope with no ``sig`` param."""

    def __init__(self) -> None:
        super().__init__("Missing required 'sig' param")


class SigningFailed(EnvelopeError):
    """The identity service could not sign the envelope."""


class AuthorMismatch(EnvelopeError):
    """Alias claimed in params differs from the alias linked to the signer."""

    def __init__(self, claimed: str, resolved: str | None) -> None:
        self.claimed = claimed
        self.resolved = resolved
        super().__init__(
            f"Alias linked to address ({resolved!r}) does not match "
            f"alias in params ({claimed!r})"
        )


class VerificationFailed(EnvelopeError):
    """The identity service could not resolve the envelope's author."""


class NoSignature(EnvelopeError):
    """Identity requested for an unsigned envelope."""

    def __init__(self) -> None:
        super().__init__("Cannot access 'uuid' for unsigned message")


class IdentityServiceError(Exception):
    """Base error raised by identity service implementations."""


class UnknownAddress(IdentityServiceError):
    """No ledger record exists for the signing address."""

    def __init__(self, address: str | None) -> None:
        self.address = address
        super().__init__(f"No ledger record for address: {address}")


class InvalidSignature(IdentityServiceError):
    """Signature does not match the signed data and domain."""


__all__ = [
    "EnvelopeError",
    "InvalidInputKind",
    "MissingService",
    "MissingSignature",
    "SigningFailed",
    "AuthorMismatch",
    "VerificationFailed",
    "NoSignature",
    "IdentityServiceError",
    "UnknownAddress",
    "InvalidSignature",
]
