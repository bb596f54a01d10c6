"""Signed message envelope."""

from __future__ import annotations

import copy
import functools
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from .constants import (
    ADDRESS_PARAM,
    ALIAS_PARAM,
    PARAMS_BUCKET,
    SIG_PARAM,
    SIGNED_BUCKET,
)
from .contracts import Authorship, EnvelopePayload
from .encoding import (
    canonical_value,
    canonicalize_signed,
    decode_message_uri,
    encode_message_uri,
    hex_to_utf8,
    message_uuid,
    strip_hex_prefix,
    utf8_to_hex,
    zcut,
)
from .errors import (
    AuthorMismatch,
    InvalidInputKind,
    MissingService,
    MissingSignature,
    NoSignature,
    SigningFailed,
    VerificationFailed,
)

if TYPE_CHECKING:
    from .service.base import IdentityService

logger = logging.getLogger(__name__)


class Envelope:
    """Application data plus the params describing who signed it.

    ``signed`` holds string-valued application data and ``params`` holds
    signature metadata (``alias``, ``sig``, ``address`` and anything else a
    producer adds). ``verified`` is only true right after a successful
    :meth:`sign`, :meth:`verify` or :meth:`verify_sync`; mutating signed data
    or the ``alias``/``sig`` params resets it.

    Instances are not safe for concurrent use. Callers must not mutate an
    envelope while a ``sign``/``verify`` call on it is in flight.
    """

    def __init__(self, data: Any = None) -> None:
        if isinstance(data, Envelope):
            payload = data.payload
        elif isinstance(data, Mapping):
            payload = copy.deepcopy(dict(data))
            if SIGNED_BUCKET not in payload:
                payload = {SIGNED_BUCKET: payload}
        elif isinstance(data, str):
            payload = decode_message_uri(data)
        elif data is None:
            payload = {}
        else:
            raise InvalidInputKind(type(data))

        self.signed: Dict[str, str] = canonicalize_signed(_bucket(payload, SIGNED_BUCKET))
        self.params: Dict[str, Optional[Any]] = dict(_bucket(payload, PARAMS_BUCKET))
        sig = self.params.get(SIG_PARAM)
        if isinstance(sig, str):
            self.params[SIG_PARAM] = strip_hex_prefix(sig)

        self.verified = False

    @classmethod
    def from_uri(cls, uri: str) -> "Envelope":
        """Build an envelope from a URL or url-encoded query string."""
        return cls(uri)

    @classmethod
    def from_json(cls, data: str) -> "Envelope":
        """Build an envelope from the JSON produced by :meth:`to_json`."""
        parsed = json.loads(data)
        if not isinstance(parsed, Mapping):
            raise InvalidInputKind(type(parsed))
        return cls(parsed)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_signed(self, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into the signed data, discarding any signature."""
        if fields:
            self.clear_signature()
        self.signed.update(canonicalize_signed(fields))

    def add_params(self, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into params.

        Touching ``alias`` or ``sig`` discards the current signature before the
        new values are applied.
        """
        if ALIAS_PARAM in fields or SIG_PARAM in fields:
            self.clear_signature()
        self.params.update(fields)

    def clear_signature(self) -> None:
        """Remove the signature and mark the envelope unverified."""
        self.params[SIG_PARAM] = None
        self.verified = False

    def set_author_alias(self, alias: str) -> None:
        """Claim ``alias`` as the author, stored hex-encoded."""
        self.params[ALIAS_PARAM] = _encode_alias(alias)
        self.verified = False

    def set_signature(self, sig: str) -> None:
        """Store ``sig`` without its ``0x`` prefix."""
        self.params[SIG_PARAM] = strip_hex_prefix(sig)
        self.verified = False

    # ------------------------------------------------------------------
    # Signing and verification
    # ------------------------------------------------------------------

    async def sign(
        self, service: Optional["IdentityService"], domain: Optional[Sequence[Any]] = None
    ) -> "Envelope":
        """Sign the signed data through ``service`` and merge the returned params."""
        if service is None:
            raise MissingService()

        try:
            result = await service.sign_data(dict(self.signed), _domain(domain))
            returned = _signing_params(result)
        except Exception as e:
            logger.error(f"Failed to sign message: {e}")
            raise SigningFailed(f"Failed to sign message: {e}") from e

        self.params = {**self.params, **returned}
        self.verified = True
        logger.debug(f"Signed message {message_uuid(returned[SIG_PARAM])}")
        return self

    async def verify(
        self, service: Optional["IdentityService"], domain: Optional[Sequence[Any]] = None
    ) -> "Envelope":
        """Check that the signer's alias matches the claimed one, adopting it if unclaimed."""
        self._check_verifiable(service)
        try:
            authorship = await service.verify_data(self, _domain(domain))
        except Exception as e:
            logger.error(f"Failed to get alias for message {self.uuid}: {e}")
            raise VerificationFailed("Failed to get alias") from e
        return self._reconcile(authorship)

    def verify_sync(
        self,
        service: Optional["IdentityService"],
        block_number: Optional[int],
        domain: Optional[Sequence[Any]] = None,
    ) -> "Envelope":
        """Blocking :meth:`verify` against the ledger state at ``block_number``."""
        self._check_verifiable(service)
        try:
            authorship = service.verify_data_sync(self, block_number, _domain(domain))
        except Exception as e:
            logger.error(
                f"Failed to get alias for message {self.uuid} at block {block_number}: {e}"
            )
            raise VerificationFailed("Failed to get alias") from e
        return self._reconcile(authorship)

    def _check_verifiable(self, service: Optional["IdentityService"]) -> None:
        if service is None:
            raise MissingService()
        if not self.signature:
            raise MissingSignature()

    def _reconcile(self, authorship: Any) -> "Envelope":
        try:
            resolved = Authorship.model_validate(authorship).alias
        except ValidationError as e:
            logger.error(f"Identity service returned malformed authorship: {e}")
            raise VerificationFailed("Failed to get alias") from e

        resolved_hex = _encode_alias(resolved) if resolved is not None else None
        claimed = self.params.get(ALIAS_PARAM)
        if claimed and str(claimed).lower() != (resolved_hex or ""):
            logger.warning(
                f"Alias mismatch for message {self.uuid}: claimed {claimed}, resolved {resolved_hex}"
            )
            raise AuthorMismatch(claimed, resolved_hex)

        self.params[ALIAS_PARAM] = resolved_hex
        self.verified = True
        logger.debug(f"Verified message {self.uuid} authored by {resolved}")
        return self

    # ------------------------------------------------------------------
    # Ordering and accessors
    # ------------------------------------------------------------------

    def compare(self, other: "Envelope") -> int:
        """Canonical sort order for signed messages: ``-1``, ``0`` or ``1``."""
        a, b = self.uuid, other.uuid
        return (a > b) - (a < b)

    @property
    def uuid(self) -> str:
        """Identity derived from the signature.

        Raises instead of returning ``None`` so that two unsigned messages can
        never compare equal by identity.
        """
        if not self.signature:
            raise NoSignature()
        return message_uuid(self.signature)

    @property
    def uri(self) -> str:
        """Payload as a url-encoded query string, for signed GET requests."""
        return encode_message_uri(self.payload)

    @property
    def author_alias(self) -> Optional[str]:
        """UTF-8 alias claimed by or resolved for the author."""
        alias = self.params.get(ALIAS_PARAM)
        return hex_to_utf8(alias) if alias else None

    @property
    def author_address(self) -> Optional[str]:
        return self.params.get(ADDRESS_PARAM)

    @property
    def signature(self) -> Optional[str]:
        return self.params.get(SIG_PARAM)

    @property
    def keys(self) -> List[str]:
        """Signed data keys, in insertion order."""
        return list(self.signed)

    @property
    def payload(self) -> Dict[str, Dict[str, Any]]:
        """Deep copy of both buckets; params set to ``None`` are left out."""
        return {
            SIGNED_BUCKET: dict(self.signed),
            PARAMS_BUCKET: {
                key: copy.deepcopy(value)
                for key, value in self.params.items()
                if value is not None
            },
        }

    def to_json(self) -> str:
        """Serialize payload to compact JSON."""
        return EnvelopePayload.model_validate(self.payload).to_json()

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return (
            f"Envelope(keys={self.keys!r}, signature={self.signature!r}, "
            f"verified={self.verified})"
        )


def sort_envelopes(envelopes: Iterable[Envelope]) -> List[Envelope]:
    """Return ``envelopes`` in canonical order. Every envelope must be signed."""
    return sorted(envelopes, key=functools.cmp_to_key(Envelope.compare))


def _encode_alias(alias: str) -> str:
    return zcut(utf8_to_hex(alias))


def _domain(domain: Optional[Sequence[Any]]) -> Sequence[Any]:
    return [] if domain is None else domain


def _signing_params(result: Any) -> Dict[str, Any]:
    """Extract params from a signing result, normalizing the signature."""
    if not isinstance(result, Mapping):
        raise TypeError(f"Signing result must be a mapping, got {type(result).__name__}")
    params = dict(result.get(PARAMS_BUCKET, result))
    sig = params.get(SIG_PARAM)
    sig = strip_hex_prefix(canonical_value(sig)) if sig is not None else ""
    if not sig:
        raise ValueError("Signing result is missing 'sig'")
    params[SIG_PARAM] = sig
    return params


def _bucket(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return bucket ``name`` of ``payload``, empty when absent."""
    value = payload.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidInputKind(type(value), f"Bucket {name!r} must be a mapping")
    return value


__all__ = ["Envelope", "sort_envelopes"]
