"""Ed25519 key utilities for the local identity service."""

from __future__ import annotations

import hashlib
from typing import Tuple

from nacl.signing import SigningKey

from ..constants import HEX_PREFIX
from ..encoding import strip_hex_prefix

ADDRESS_HEX_CHARS = 40


def generate_keypair() -> Tuple[bytes, bytes]:
    """
    Generate an Ed25519 keypair.
    Returns (private_key_seed_32_bytes, public_key_32_bytes)
    """
    sk = SigningKey.generate()
    return bytes(sk), bytes(sk.verify_key)


def address_from_public_key(public_key: bytes) -> str:
    """
    Derive a ``0x``-prefixed 20-byte address from the tail of sha256(public_key).
    """
    if len(public_key) != 32:
        raise ValueError("Ed25519 public key must be 32 bytes")
    digest = hashlib.sha256(public_key).hexdigest()
    return HEX_PREFIX + digest[-ADDRESS_HEX_CHARS:]


def normalize_address(address: str) -> str:
    """Lowercase ``address`` and make sure it carries a ``0x`` prefix."""
    return HEX_PREFIX + strip_hex_prefix(address.lower())
