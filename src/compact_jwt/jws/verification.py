"""Verification strategies for decode().

A strategy decides whether a decoded token is trusted. The set is
closed; decode() runs exactly one strategy per token:

    NoVerify()                      accept without checking (verified=False)
    VerifyWithKey(algorithm, key)   pinned algorithm, fixed key
    VerifyWithKeyResolver(resolver) resolver(header, payload) -> (algorithm, key)
    CustomVerify(verifier)          verifier(signing_input, signature, header, payload)

VerifyWithKey never lets the token choose its algorithm: the header
"alg" must equal the pinned algorithm's name before any key is used.
Resolvers pick the algorithm themselves and are held to the same check.

Failure mapping:
    header "alg" differs from the pinned name  -> AlgorithmMismatchError
    resolver raises anything                   -> KeyResolutionError
    custom verifier returns False              -> InvalidSignatureError
    custom verifier raises a JWTError          -> propagated unchanged
    custom verifier raises anything else       -> KeyResolutionError
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, NoReturn

from compact_jwt.exceptions import (
    AlgorithmMismatchError,
    InvalidKeyError,
    InvalidSignatureError,
    JWTError,
    KeyResolutionError,
)
from compact_jwt.jws.algorithms import Algorithm
from compact_jwt.jws.header import Header
from compact_jwt.telemetry.system_logger import get_system_logger

__all__ = [
    "CustomVerify",
    "KeyResolver",
    "NoVerify",
    "VerificationStrategy",
    "Verifier",
    "VerifyWithKey",
    "VerifyWithKeyResolver",
    "apply_strategy",
    "verify_with_any",
]

_system_logger = get_system_logger()

KeyResolver = Callable[[Header, Any], tuple[Algorithm, Any]]
Verifier = Callable[[bytes, bytes, Header, Any], object]


def _assert_never(value: NoReturn) -> NoReturn:
    """Assert that a code path is never reached.

    Used for exhaustive strategy dispatch - the type checker will warn
    if not all strategy types are handled before this is called.

    Args:
        value: The value that should never exist.

    Raises:
        AssertionError: Always raised if this code is reached.
    """
    raise AssertionError(f"Unexpected value: {value!r}")


@dataclass(frozen=True)
class NoVerify:
    """Accept the token without checking its signature.

    Only for tokens whose integrity is established by other means.
    The resulting Token has verified=False.
    """


@dataclass(frozen=True)
class VerifyWithKey:
    """Verify with a fixed algorithm and key.

    Attributes:
        algorithm: Algorithm the token must declare in its header.
        key: Verification key (HMAC secret or public key).
    """

    algorithm: Algorithm
    key: Any = field(repr=False)


@dataclass(frozen=True)
class VerifyWithKeyResolver:
    """Pick algorithm and key from the decoded header and payload.

    Typical resolvers look up header.kid or the issuer claim. The
    resolver sees untrusted data: the payload has not been verified yet.

    Attributes:
        resolver: Callable (header, payload) -> (algorithm, key).
    """

    resolver: KeyResolver


@dataclass(frozen=True)
class CustomVerify:
    """Delegate the decision to a caller-supplied verifier.

    The verifier receives (signing_input, signature, header, payload).
    Returning False rejects; any other return value accepts.

    Attributes:
        verifier: The verification callable.
    """

    verifier: Verifier


VerificationStrategy = NoVerify | VerifyWithKey | VerifyWithKeyResolver | CustomVerify


def _verify_pinned(
    algorithm: Algorithm,
    key: Any,
    header: Header,
    signing_input: bytes,
    signature: bytes,
) -> None:
    if header.alg != algorithm.name:
        raise AlgorithmMismatchError(algorithm.name, header.alg)
    algorithm.verify(signing_input, signature, key)


def _resolve_key(resolver: KeyResolver, header: Header, payload: Any) -> tuple[Algorithm, Any]:
    try:
        algorithm, key = resolver(header, payload)
    except Exception as e:
        _system_logger.debug(
            {
                "event": "key_resolution_failed",
                "message": f"Key resolver failed: {e}",
                "kid": header.kid,
                "error_type": type(e).__name__,
            }
        )
        raise KeyResolutionError(f"Key resolver failed: {e}") from e

    if not isinstance(algorithm, Algorithm):
        raise KeyResolutionError(f"Key resolver returned {type(algorithm).__name__}, expected an algorithm")
    return algorithm, key


def _run_custom(
    verifier: Verifier,
    header: Header,
    payload: Any,
    signing_input: bytes,
    signature: bytes,
) -> None:
    try:
        accepted = verifier(signing_input, signature, header, payload)
    except JWTError:
        raise
    except Exception as e:
        _system_logger.debug(
            {
                "event": "key_resolution_failed",
                "message": f"Custom verifier failed: {e}",
                "kid": header.kid,
                "error_type": type(e).__name__,
            }
        )
        raise KeyResolutionError(f"Custom verifier failed: {e}") from e

    if accepted is False:
        raise InvalidSignatureError("Signature verification failed")


def apply_strategy(
    strategy: VerificationStrategy,
    header: Header,
    payload: Any,
    signing_input: bytes,
    signature: bytes,
) -> bool:
    """Run the strategy against a decoded token.

    Args:
        strategy: Verification strategy chosen by the caller.
        header: Decoded header.
        payload: Decoded (typed) payload.
        signing_input: Raw "header.payload" segments as ASCII bytes.
        signature: Decoded signature bytes.

    Returns:
        True if a signature was checked, False for NoVerify.

    Raises:
        JWTError: If the strategy rejects the token.
    """
    if isinstance(strategy, NoVerify):
        return False
    if isinstance(strategy, VerifyWithKey):
        _verify_pinned(strategy.algorithm, strategy.key, header, signing_input, signature)
        return True
    if isinstance(strategy, VerifyWithKeyResolver):
        algorithm, key = _resolve_key(strategy.resolver, header, payload)
        _verify_pinned(algorithm, key, header, signing_input, signature)
        return True
    if isinstance(strategy, CustomVerify):
        _run_custom(strategy.verifier, header, payload, signing_input, signature)
        return True
    _assert_never(strategy)


def verify_with_any(candidates: Iterable[tuple[Algorithm, Any]]) -> CustomVerify:
    """Accept a token signed by any of several (algorithm, key) pairs.

    Only candidates whose algorithm name equals the header "alg" are
    tried, so the token still cannot choose an algorithm the caller did
    not list. Useful during key rotation.

    Args:
        candidates: (algorithm, key) pairs, tried in order.

    Returns:
        A CustomVerify strategy.

    Raises:
        ValueError: If no candidates are given.
    """
    pairs = tuple(candidates)
    if not pairs:
        raise ValueError("verify_with_any requires at least one (algorithm, key) pair")
    allowed = ", ".join(dict.fromkeys(algorithm.name for algorithm, _ in pairs))

    def verifier(signing_input: bytes, signature: bytes, header: Header, payload: Any) -> bool:
        matching = [(algorithm, key) for algorithm, key in pairs if algorithm.name == header.alg]
        if not matching:
            raise AlgorithmMismatchError(allowed, header.alg)

        for algorithm, key in matching:
            try:
                algorithm.verify(signing_input, signature, key)
            except (InvalidSignatureError, InvalidKeyError):
                continue
            return True
        raise InvalidSignatureError("Signature verification failed")

    return CustomVerify(verifier)
