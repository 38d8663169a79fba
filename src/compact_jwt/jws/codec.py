"""Compact JWS codec (RFC 7515 Section 7.1).

Wire format:
    base64url(header_json) "." base64url(payload_json) "." base64url(signature)

Encode:
    1. Force header "alg" to algorithm.name
    2. Serialize header and payload to canonical JSON (compact, UTF-8)
    3. base64url both, join with "." -> signing input
    4. algorithm.sign(signing input, key) -> signature

Decode:
    1. Split into exactly three non-empty segments
    2. Header segment -> strict base64url -> JSON object -> Header
    3. Payload segment -> strict base64url -> JSON -> payload_type
    4. Signature segment -> strict base64url -> bytes
    5. Run the verification strategy over the raw "header.payload" text

The signing input is always the received segment text, never a
re-serialization of the decoded values. Every failure on untrusted input
surfaces as a JWTError subclass.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar, overload

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from compact_jwt.claims import Claims
from compact_jwt.constants import SEGMENT_COUNT, SEGMENT_SEPARATOR
from compact_jwt.exceptions import (
    EncodingError,
    InvalidHeaderError,
    InvalidPayloadError,
    InvalidSignatureError,
    JWTError,
    MalformedTokenError,
    SigningError,
)
from compact_jwt.jws.algorithms import Algorithm
from compact_jwt.jws.header import Header
from compact_jwt.jws.token import Token
from compact_jwt.jws.verification import VerificationStrategy, apply_strategy
from compact_jwt.telemetry.system_logger import get_system_logger
from compact_jwt.utils.encoding import b64url_decode, b64url_encode, from_json, to_json

__all__ = [
    "decode",
    "encode",
    "get_unverified_header",
]

_system_logger = get_system_logger()

P = TypeVar("P")


# =============================================================================
# Encode
# =============================================================================


def _payload_to_wire(payload: Any) -> Any:
    if isinstance(payload, Claims):
        return payload.to_wire()
    if isinstance(payload, BaseModel):
        # by alias, so decode(payload_type=type(payload)) reads it back
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return to_jsonable_python(payload)


def encode(header: Header | None, payload: Any, algorithm: Algorithm, key: Any) -> str:
    """Serialize and sign a token.

    Args:
        header: JOSE header; None means Header(). Its "alg" is replaced.
        payload: Claims, pydantic model (dumped by alias), dataclass, dict or
            any JSON-compatible value.
        algorithm: Signing algorithm.
        key: Signing key for the algorithm.

    Returns:
        The compact token "header.payload.signature".

    Raises:
        EncodingError: If the header or payload cannot be serialized.
        SigningError: If the key does not fit or signing fails.
    """
    header = (header if header is not None else Header()).with_algorithm(algorithm.name)

    try:
        header_json = to_json(header.to_wire())
        payload_json = to_json(_payload_to_wire(payload))
    except (TypeError, ValueError, RecursionError, PydanticSerializationError) as e:
        raise EncodingError(f"Could not serialize token: {e}") from e

    signing_input = f"{b64url_encode(header_json)}{SEGMENT_SEPARATOR}{b64url_encode(payload_json)}"

    try:
        signature = algorithm.sign(signing_input.encode("ascii"), key)
    except SigningError:
        raise
    except Exception as e:
        raise SigningError(f"{algorithm.name} signing failed: {e}") from e

    _system_logger.debug(
        {
            "event": "token_encoded",
            "message": f"Signed token with {algorithm.name}",
            "alg": algorithm.name,
        }
    )
    return f"{signing_input}{SEGMENT_SEPARATOR}{b64url_encode(signature)}"


# =============================================================================
# Decode
# =============================================================================


def _split(token: Any) -> list[str]:
    if not isinstance(token, str):
        raise MalformedTokenError(f"Token must be a string, got {type(token).__name__}")
    segments = token.split(SEGMENT_SEPARATOR)
    if len(segments) != SEGMENT_COUNT or not all(segments):
        raise MalformedTokenError(f"Token must have {SEGMENT_COUNT} non-empty segments")
    return segments


def _decode_header(segment: str) -> Header:
    try:
        data = from_json(b64url_decode(segment))
    except (ValueError, RecursionError) as e:
        raise InvalidHeaderError(f"Header is not base64url-encoded JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidHeaderError("Header must be a JSON object")
    alg = data.get("alg")
    if not isinstance(alg, str) or not alg:
        raise InvalidHeaderError('Header "alg" must be a non-empty string')

    try:
        return Header.from_wire(data)
    except ValidationError as e:
        raise InvalidHeaderError(f"Invalid header: {e.errors()[0]['msg']}") from e


@lru_cache(maxsize=128)
def _adapter(payload_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(payload_type)


def _decode_payload(segment: str, payload_type: Any) -> Any:
    try:
        data = from_json(b64url_decode(segment))
    except (ValueError, RecursionError) as e:
        raise InvalidPayloadError(f"Payload is not base64url-encoded JSON: {e}") from e

    if payload_type is None:
        return data

    try:
        return _adapter(payload_type).validate_python(data)
    except ValidationError as e:
        type_name = getattr(payload_type, "__name__", repr(payload_type))
        raise InvalidPayloadError(f"Payload does not match {type_name}: {e.error_count()} error(s)") from e


def _decode_signature(segment: str) -> bytes:
    try:
        return b64url_decode(segment)
    except ValueError as e:
        raise InvalidSignatureError(f"Signature is not base64url: {e}") from e


def get_unverified_header(token: str) -> Header:
    """Decode only the header, without verifying anything.

    For choosing a key (e.g. by "kid") before calling decode(). Nothing
    in the returned header is trusted.

    Raises:
        MalformedTokenError: If the token is not three non-empty segments.
        InvalidHeaderError: If the header segment is invalid.
    """
    header_segment, _, _ = _split(token)
    return _decode_header(header_segment)


@overload
def decode(token: str, strategy: VerificationStrategy, payload_type: None = None) -> Token[Any]: ...


@overload
def decode(token: str, strategy: VerificationStrategy, payload_type: type[P]) -> Token[P]: ...


def decode(token: str, strategy: VerificationStrategy, payload_type: Any = None) -> Token[Any]:
    """Parse a compact token and verify it with the given strategy.

    Claims are not validated here; run validate() on token.payload.

    Args:
        token: Compact token text.
        strategy: How to establish trust (see compact_jwt.jws.verification).
        payload_type: Type to validate the payload into (pydantic model,
            dataclass, TypedDict, dict[str, Any], ...). None returns the
            raw JSON value.

    Returns:
        The decoded Token.

    Raises:
        MalformedTokenError: Wrong segment structure.
        InvalidHeaderError: Undecodable header or missing "alg".
        InvalidPayloadError: Undecodable payload or type mismatch.
        InvalidSignatureError: Malformed or non-verifying signature.
        AlgorithmMismatchError: Header "alg" differs from the pinned algorithm.
        KeyResolutionError: Resolver or custom verifier failure.
    """
    try:
        header_segment, payload_segment, signature_segment = _split(token)
        header = _decode_header(header_segment)
        payload = _decode_payload(payload_segment, payload_type)
        signature = _decode_signature(signature_segment)

        signing_input = f"{header_segment}{SEGMENT_SEPARATOR}{payload_segment}".encode("ascii")
        verified = apply_strategy(strategy, header, payload, signing_input, signature)
    except JWTError as e:
        _system_logger.debug(
            {
                "event": "token_rejected",
                "message": f"Token rejected: {e}",
                "error_kind": e.kind.value,
                "strategy": type(strategy).__name__,
            }
        )
        raise

    _system_logger.debug(
        {
            "event": "token_decoded",
            "message": f"Decoded {header.alg} token",
            "alg": header.alg,
            "kid": header.kid,
            "verified": verified,
        }
    )
    return Token(header=header, payload=payload, verified=verified)
