"""Pure encoding helpers for envelope payloads.

None of these functions hold state; they convert between the textual forms an
envelope travels in (hex, UTF-8, percent-encoded query strings) and compute the
identity derived from a signature.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, unquote

from .constants import BUCKETS, HEX_PREFIX, UUID_LENGTH

# Characters ``encodeURIComponent`` leaves untouched besides letters, digits
# and ``-_.~`` which ``quote`` never escapes.
_URI_SAFE = "!*'()"


def strip_hex_prefix(value: str) -> str:
    """Return ``value`` without a leading ``0x``."""
    return value[len(HEX_PREFIX):] if value.startswith(HEX_PREFIX) else value


def utf8_to_hex(text: str) -> str:
    """Hex-encode the UTF-8 bytes of ``text`` with a ``0x`` prefix."""
    return HEX_PREFIX + text.encode("utf-8").hex()


def hex_to_utf8(value: str) -> str:
    """Decode a hex string into text, dropping null byte padding on either side."""
    data = bytes.fromhex(strip_hex_prefix(value))
    return data.strip(b"\x00").decode("utf-8")


def zcut(value: str) -> str:
    """Drop the ``0x`` prefix and any leading zero bytes from a hex string."""
    digits = strip_hex_prefix(value)
    while digits.startswith("00"):
        digits = digits[2:]
    return digits


def canonical_value(value: Any) -> str:
    """Return ``value`` as a string, serializing non-strings as compact JSON.

    Integers keep their full precision since they are written out digit by
    digit rather than passed through a float.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def canonicalize_signed(data: Mapping[str, Any]) -> Dict[str, str]:
    """Apply :func:`canonical_value` to every value of ``data``."""
    return {key: canonical_value(value) for key, value in data.items()}


def message_uuid(signature: str) -> str:
    """Identity of a message: the first 40 signature characters, prefix excluded."""
    return strip_hex_prefix(signature)[:UUID_LENGTH]


def encode_uri_component(text: str) -> str:
    """Percent-encode ``text`` the way browsers' ``encodeURIComponent`` does."""
    return quote(text, safe=_URI_SAFE)


def encode_message_uri(payload: Mapping[str, Mapping[str, Any]]) -> str:
    """Flatten a payload into a ``&``-joined query string.

    Each key is written as ``<bucket><field>``. Buckets are emitted in wire
    order and ``None`` values are skipped.
    """
    pairs = []
    for bucket in BUCKETS:
        for key, value in (payload.get(bucket) or {}).items():
            if value is None:
                continue
            pairs.append(
                f"{encode_uri_component(bucket + key)}="
                f"{encode_uri_component(canonical_value(value))}"
            )
    return "&".join(pairs)


def query_portion(uri: str) -> str:
    """Return the part of ``uri`` after whichever of ``?`` or ``#`` comes last."""
    index = max(uri.find("?"), uri.find("#"))
    return uri[index + 1:] if index > -1 else uri


def decode_message_uri(uri: str) -> Dict[str, Dict[str, Optional[str]]]:
    """Parse a query string produced by :func:`encode_message_uri`.

    A key is routed to every bucket whose name occurs anywhere inside it, with
    everything up to and including that occurrence removed. A key such as
    ``_params__signed_x`` therefore lands in both buckets.
    """
    payload: Dict[str, Dict[str, Optional[str]]] = {bucket: {} for bucket in BUCKETS}
    for pair in query_portion(uri).split("&"):
        raw_key, _, raw_value = pair.partition("=")
        key = unquote(raw_key)
        value = unquote(raw_value)
        for bucket in BUCKETS:
            index = key.find(bucket)
            if index != -1:
                payload[bucket][key[index + len(bucket):]] = value
    return payload


__all__ = [
    "strip_hex_prefix",
    "utf8_to_hex",
    "hex_to_utf8",
    "zcut",
    "canonical_value",
    "canonicalize_signed",
    "message_uuid",
    "encode_uri_component",
    "encode_message_uri",
    "query_portion",
    "decode_message_uri",
]
