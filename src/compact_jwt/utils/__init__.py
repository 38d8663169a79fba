"""Utility modules for compact-jwt."""

from compact_jwt.utils.clock import now_seconds, to_numeric_date
from compact_jwt.utils.encoding import b64url_decode, b64url_encode, from_json, to_json

__all__ = [
    "b64url_decode",
    "b64url_encode",
    "from_json",
    "now_seconds",
    "to_json",
    "to_numeric_date",
]
