"""signed-envelope: signed message envelopes with URI and object wire forms."""

from .config import EnvelopeConfig, load_config
from .contracts import Authorship, EnvelopePayload
from .envelope import Envelope, sort_envelopes
from .errors import (
    AuthorMismatch,
    EnvelopeError,
    IdentityServiceError,
    InvalidInputKind,
    MissingService,
    MissingSignature,
    NoSignature,
    SigningFailed,
    VerificationFailed,
)
from .service import IdentityService, LocalIdentityService, get_identity_service

__version__ = "0.1.0"
__all__ = [
    "Envelope",
    "sort_envelopes",
    "EnvelopePayload",
    "Authorship",
    "IdentityService",
    "LocalIdentityService",
    "get_identity_service",
    "EnvelopeConfig",
    "load_config",
    "EnvelopeError",
    "InvalidInputKind",
    "MissingService",
    "MissingSignature",
    "SigningFailed",
    "AuthorMismatch",
    "VerificationFailed",
    "NoSignature",
    "IdentityServiceError",
]
