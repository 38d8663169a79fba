"""Exception hierarchy for compact-jwt.

Every failure surfaced by the codec, the verification strategies and the
claim validators is a JWTError subclass. Each class carries an ErrorKind
so callers can branch on the failure category without isinstance chains:

    JWTError
    ├── MalformedTokenError
    ├── InvalidHeaderError
    ├── InvalidPayloadError
    ├── UnsupportedAlgorithmError
    ├── AlgorithmMismatchError
    ├── InvalidSignatureError
    ├── InvalidKeyError
    ├── KeyResolutionError
    ├── SigningError
    ├── EncodingError
    └── ClaimValidationError
        ├── ExpiredError
        ├── NotYetValidError
        ├── FutureIssuedAtError
        ├── ClaimMismatchError
        └── InvalidClaimError

Malformed tokens are ordinary input: decoding never lets a ValueError,
binascii.Error or pydantic ValidationError escape for attacker-controlled
bytes. They are translated into the types below with the original
exception chained as __cause__.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ErrorKind",
    "JWTError",
    "MalformedTokenError",
    "InvalidHeaderError",
    "InvalidPayloadError",
    "UnsupportedAlgorithmError",
    "AlgorithmMismatchError",
    "InvalidSignatureError",
    "InvalidKeyError",
    "KeyResolutionError",
    "SigningError",
    "EncodingError",
    "ClaimValidationError",
    "ExpiredError",
    "NotYetValidError",
    "FutureIssuedAtError",
    "ClaimMismatchError",
    "InvalidClaimError",
]


class ErrorKind(str, Enum):
    """Failure categories, stable across releases."""

    MALFORMED_TOKEN = "malformed_token"
    INVALID_HEADER = "invalid_header"
    INVALID_PAYLOAD = "invalid_payload"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_KEY = "invalid_key"
    KEY_RESOLUTION_FAILED = "key_resolution_failed"
    SIGNING_FAILED = "signing_failed"
    ENCODING_FAILED = "encoding_failed"
    CLAIM_VALIDATION_FAILED = "claim_validation_failed"
    EXPIRED = "expired"
    NOT_YET_VALID = "not_yet_valid"
    FUTURE_ISSUED_AT = "future_issued_at"
    CLAIM_MISMATCH = "claim_mismatch"
    INVALID_CLAIM = "invalid_claim"


class JWTError(Exception):
    """Base class for all compact-jwt errors."""

    kind: ErrorKind = ErrorKind.MALFORMED_TOKEN


class MalformedTokenError(JWTError):
    """Token is not three non-empty dot-separated segments."""

    kind = ErrorKind.MALFORMED_TOKEN


class InvalidHeaderError(JWTError):
    """Header segment is not base64url-encoded JSON describing a JOSE header."""

    kind = ErrorKind.INVALID_HEADER


class InvalidPayloadError(JWTError):
    """Payload segment could not be decoded into the requested payload type."""

    kind = ErrorKind.INVALID_PAYLOAD


class UnsupportedAlgorithmError(JWTError):
    """Algorithm name is not registered."""

    kind = ErrorKind.UNSUPPORTED_ALGORITHM

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unsupported algorithm: {name!r}")


class AlgorithmMismatchError(JWTError):
    """Header "alg" disagrees with the algorithm pinned by the verifier."""

    kind = ErrorKind.ALGORITHM_MISMATCH

    def __init__(self, expected: str, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Algorithm mismatch: expected {expected!r}, token declares {actual!r}")


class InvalidSignatureError(JWTError):
    """Signature is malformed or does not verify."""

    kind = ErrorKind.INVALID_SIGNATURE


class InvalidKeyError(JWTError):
    """Key has the wrong type or shape for the algorithm."""

    kind = ErrorKind.INVALID_KEY


class KeyResolutionError(JWTError):
    """Key resolver or custom verifier failed."""

    kind = ErrorKind.KEY_RESOLUTION_FAILED


class SigningError(JWTError):
    """Signing primitive failed or the key does not fit the algorithm."""

    kind = ErrorKind.SIGNING_FAILED


class EncodingError(JWTError):
    """Header or payload could not be serialized to JSON."""

    kind = ErrorKind.ENCODING_FAILED


# =============================================================================
# Claim validation
# =============================================================================


class ClaimValidationError(JWTError):
    """Base class for claim validator failures."""

    kind = ErrorKind.CLAIM_VALIDATION_FAILED


class ExpiredError(ClaimValidationError):
    """Current time is at or past "exp"."""

    kind = ErrorKind.EXPIRED

    def __init__(self, expired_at: int) -> None:
        self.expired_at = expired_at
        super().__init__(f"Token expired at {expired_at}")


class NotYetValidError(ClaimValidationError):
    """Current time is before "nbf"."""

    kind = ErrorKind.NOT_YET_VALID

    def __init__(self, not_before: int) -> None:
        self.not_before = not_before
        super().__init__(f"Token not valid before {not_before}")


class FutureIssuedAtError(ClaimValidationError):
    """Claim "iat" lies in the future."""

    kind = ErrorKind.FUTURE_ISSUED_AT

    def __init__(self, issued_at: int) -> None:
        self.issued_at = issued_at
        super().__init__(f"Token issued in the future at {issued_at}")


class ClaimMismatchError(ClaimValidationError):
    """Expected claim is absent or has a different value."""

    kind = ErrorKind.CLAIM_MISMATCH

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}")


class InvalidClaimError(ClaimValidationError):
    """Claim is present but has the wrong JSON type."""

    kind = ErrorKind.INVALID_CLAIM

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {reason}")
