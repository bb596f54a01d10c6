"""In-process identity service backed by Ed25519 keys and an alias ledger."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from ..constants import ADDRESS_PARAM, SIG_PARAM
from ..contracts import Authorship
from ..errors import IdentityServiceError, InvalidSignature, UnknownAddress
from .base import IdentityService
from .keys import address_from_public_key
from .ledger import AliasLedger

if TYPE_CHECKING:
    from ..envelope import Envelope

logger = logging.getLogger(__name__)


def canonicalize_signed_data(signed: Mapping[str, str], domain: Sequence[Any]) -> bytes:
    """
    Create canonical JSON for signing: sorted keys, compact, literal UTF-8.
    """
    body = {"domain": list(domain), "signed": dict(signed)}
    return json.dumps(
        body, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


class LocalIdentityService(IdentityService):
    """Signs with a local key and resolves aliases from an :class:`AliasLedger`.

    ``signing_key`` is the 32-byte Ed25519 seed of the user this service signs
    for; a service without one can only verify.
    """

    def __init__(
        self, ledger: Optional[AliasLedger] = None, signing_key: Optional[bytes] = None
    ) -> None:
        self.ledger = ledger if ledger is not None else AliasLedger()
        self._signing_key = SigningKey(signing_key) if signing_key is not None else None

    @property
    def address(self) -> Optional[str]:
        """Address of the signing key, if any."""
        if self._signing_key is None:
            return None
        return address_from_public_key(bytes(self._signing_key.verify_key))

    async def sign_data(
        self, signed: Dict[str, str], domain: Sequence[Any]
    ) -> Dict[str, str]:
        if self._signing_key is None:
            raise IdentityServiceError("No signing key configured")
        message = canonicalize_signed_data(signed, domain)
        signature = self._signing_key.sign(message).signature
        logger.debug(f"Signed {len(signed)} fields as {self.address}")
        return {SIG_PARAM: signature.hex(), ADDRESS_PARAM: self.address}

    async def verify_data(
        self, envelope: "Envelope", domain: Sequence[Any]
    ) -> Authorship:
        return self.verify_data_sync(envelope, None, domain)

    def verify_data_sync(
        self, envelope: "Envelope", block_number: Optional[int], domain: Sequence[Any]
    ) -> Authorship:
        address = envelope.author_address
        record = self.ledger.resolve(address, block_number)
        if record is None:
            raise UnknownAddress(address)

        try:
            verify_key = VerifyKey(bytes.fromhex(record.public_key))
            signature = bytes.fromhex(envelope.signature or "")
            verify_key.verify(canonicalize_signed_data(envelope.signed, domain), signature)
        except (BadSignatureError, ValueError, TypeError) as e:
            raise InvalidSignature(f"Signature does not match data signed by {address}") from e

        return Authorship(
            alias=record.alias,
            address=record.address,
            block_number=record.block_number,
        )
