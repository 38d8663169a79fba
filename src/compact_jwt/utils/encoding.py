"""Wire encoding helpers: base64url without padding and canonical JSON.

Decoding is strict. Segments come from untrusted tokens, so anything a
conforming encoder would not have produced is rejected with ValueError:
characters outside the URL-safe alphabet, "=" padding, impossible
lengths, and non-zero trailing bits. The last rule keeps a single
changed character in a segment from decoding to the same bytes.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from compact_jwt.constants import JSON_SEPARATORS

__all__ = [
    "b64url_decode",
    "b64url_encode",
    "from_json",
    "to_json",
]

_B64URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url (RFC 7515 Section 2)."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Args:
        segment: Encoded text as found between the dots of a token.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If the segment is not canonical unpadded base64url.
    """
    if not _B64URL_ALPHABET.fullmatch(segment):
        raise ValueError("invalid base64url character")

    if len(segment) % 4 == 1:
        raise ValueError("invalid base64url length")

    padded = segment + "=" * (-len(segment) % 4)
    try:
        data = base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64url: {e}") from e

    if b64url_encode(data) != segment:
        raise ValueError("non-canonical base64url encoding")

    return data


def to_json(value: Any) -> bytes:
    """Serialize a JSON-compatible value to compact UTF-8 JSON bytes.

    Raises:
        TypeError: If the value holds non-JSON types.
        ValueError: If the value holds NaN/Infinity or circular references.
    """
    return json.dumps(
        value,
        separators=JSON_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def from_json(data: bytes) -> Any:
    """Parse UTF-8 JSON bytes.

    Raises:
        ValueError: If the bytes are not UTF-8 or not valid JSON.
    """
    return json.loads(data.decode("utf-8"))
