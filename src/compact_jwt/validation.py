"""Claim validation framework.

A validator is any object with a validate(claims) method that returns
None on success and raises a ClaimValidationError subclass on failure.
Validators run after decode() and are independent of the codec, so new
checks plug in without touching it.

Claims are read structurally: Mapping payloads by key, anything else by
attribute. A validator only needs the fields it checks, which lets
Claims, user pydantic models, dataclasses and plain dicts all be
validated the same way.

Built-in validators:
    IssuedAtTime    "iat" must not lie in the future
    NotBeforeTime   "nbf" must not lie in the future
    ExpiredTime     "exp" must lie in the future
    ExpectIss/Sub/Aud/Jti   claim must be present and equal
    ExpectClaim     same, for any claim name
    AudienceContains  "aud" equals the value or is a list containing it

Time validators pass when their claim is absent. Expect* validators fail
when their claim is absent.

Composition:
    validate(claims, *validators)       raise the first failure
    validate_all(claims, *validators)   collect every failure
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, runtime_checkable

from compact_jwt.constants import DEFAULT_LEEWAY_SECONDS
from compact_jwt.exceptions import (
    ClaimMismatchError,
    ClaimValidationError,
    ExpiredError,
    FutureIssuedAtError,
    InvalidClaimError,
    NotYetValidError,
)
from compact_jwt.telemetry.system_logger import get_system_logger
from compact_jwt.utils.clock import now_seconds

__all__ = [
    "Validation",
    "HasAudience",
    "HasExpiration",
    "HasIssuedAt",
    "HasIssuer",
    "HasJwtId",
    "HasNotBefore",
    "HasSubject",
    "AudienceContains",
    "ExpectAud",
    "ExpectClaim",
    "ExpectIss",
    "ExpectJti",
    "ExpectSub",
    "ExpiredTime",
    "IssuedAtTime",
    "NotBeforeTime",
    "read_claim",
    "validate",
    "validate_all",
]

_system_logger = get_system_logger()


@runtime_checkable
class Validation(Protocol):
    """Protocol for claim validators."""

    def validate(self, claims: Any) -> None:
        """Check the claims.

        Raises:
            ClaimValidationError: If the check fails.
        """
        ...


# =============================================================================
# Claim capabilities
# =============================================================================


class HasIssuer(Protocol):
    iss: str | None


class HasSubject(Protocol):
    sub: str | None


class HasAudience(Protocol):
    aud: str | None


class HasJwtId(Protocol):
    jti: str | None


class HasIssuedAt(Protocol):
    iat: int | None


class HasNotBefore(Protocol):
    nbf: int | None


class HasExpiration(Protocol):
    exp: int | None


def read_claim(claims: Any, name: str) -> Any:
    """Read a claim from a mapping or an object; None when absent."""
    if isinstance(claims, Mapping):
        return claims.get(name)
    return getattr(claims, name, None)


def _read_numeric_date(claims: Any, name: str) -> int | None:
    value = read_claim(claims, name)
    if value is None:
        return None
    # bool is an int subclass but never a NumericDate
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidClaimError(name, "must be a non-negative integer")
    return value


# =============================================================================
# Time-based validators
# =============================================================================


@dataclass(frozen=True)
class _TimeValidator:
    """Shared leeway and clock handling.

    Attributes:
        leeway: Clock skew tolerance in seconds.
        clock: Returns the current time in seconds; read once per validate().
    """

    leeway: int = DEFAULT_LEEWAY_SECONDS
    clock: Callable[[], int] = now_seconds

    def __post_init__(self) -> None:
        if self.leeway < 0:
            raise ValueError("leeway must be non-negative")


@dataclass(frozen=True)
class IssuedAtTime(_TimeValidator):
    """Reject tokens whose "iat" is later than now (plus leeway)."""

    def validate(self, claims: HasIssuedAt | Mapping[str, Any]) -> None:
        iat = _read_numeric_date(claims, "iat")
        if iat is not None and iat > self.clock() + self.leeway:
            raise FutureIssuedAtError(iat)


@dataclass(frozen=True)
class NotBeforeTime(_TimeValidator):
    """Reject tokens whose "nbf" is later than now (plus leeway)."""

    def validate(self, claims: HasNotBefore | Mapping[str, Any]) -> None:
        nbf = _read_numeric_date(claims, "nbf")
        if nbf is not None and nbf > self.clock() + self.leeway:
            raise NotYetValidError(nbf)


@dataclass(frozen=True)
class ExpiredTime(_TimeValidator):
    """Reject tokens whose "exp" is at or before now (minus leeway)."""

    def validate(self, claims: HasExpiration | Mapping[str, Any]) -> None:
        exp = _read_numeric_date(claims, "exp")
        if exp is not None and exp + self.leeway <= self.clock():
            raise ExpiredError(exp)


# =============================================================================
# Equality validators
# =============================================================================


@dataclass(frozen=True)
class ExpectClaim:
    """Require claim `name` to be present and equal to `value`."""

    name: str
    value: Any

    def validate(self, claims: Any) -> None:
        actual = read_claim(claims, self.name)
        if actual is None or actual != self.value:
            raise ClaimMismatchError(self.name)


@dataclass(frozen=True)
class _ExpectRegisteredClaim:
    claim_name: ClassVar[str]

    value: str

    def _check(self, claims: Any) -> None:
        actual = read_claim(claims, self.claim_name)
        if actual is None or actual != self.value:
            raise ClaimMismatchError(self.claim_name)


@dataclass(frozen=True)
class ExpectIss(_ExpectRegisteredClaim):
    """Require "iss" to equal the value."""

    claim_name: ClassVar[str] = "iss"

    def validate(self, claims: HasIssuer | Mapping[str, Any]) -> None:
        self._check(claims)


@dataclass(frozen=True)
class ExpectSub(_ExpectRegisteredClaim):
    """Require "sub" to equal the value."""

    claim_name: ClassVar[str] = "sub"

    def validate(self, claims: HasSubject | Mapping[str, Any]) -> None:
        self._check(claims)


@dataclass(frozen=True)
class ExpectAud(_ExpectRegisteredClaim):
    """Require "aud" to equal the value (scalar comparison, no list semantics)."""

    claim_name: ClassVar[str] = "aud"

    def validate(self, claims: HasAudience | Mapping[str, Any]) -> None:
        self._check(claims)


@dataclass(frozen=True)
class ExpectJti(_ExpectRegisteredClaim):
    """Require "jti" to equal the value."""

    claim_name: ClassVar[str] = "jti"

    def validate(self, claims: HasJwtId | Mapping[str, Any]) -> None:
        self._check(claims)


@dataclass(frozen=True)
class AudienceContains:
    """Accept an "aud" equal to the value, or a list of audiences containing it.

    RFC 7519 allows "aud" to be a single string or an array. ExpectAud
    keeps scalar equality; use this validator for payload types that
    model the array form.
    """

    value: str

    def validate(self, claims: Any) -> None:
        aud = read_claim(claims, "aud")
        if isinstance(aud, str) and aud == self.value:
            return
        if isinstance(aud, (list, tuple)) and self.value in aud:
            return
        raise ClaimMismatchError("aud")


# =============================================================================
# Composition
# =============================================================================


def validate(claims: Any, *validators: Validation) -> None:
    """Run validators in order and raise the first failure.

    Args:
        claims: Decoded payload (Claims, user model, dict, ...).
        *validators: Validators to apply.

    Raises:
        ClaimValidationError: From the first failing validator.
    """
    for validator in validators:
        try:
            validator.validate(claims)
        except ClaimValidationError as e:
            _system_logger.debug(
                {
                    "event": "claims_invalid",
                    "message": str(e),
                    "validator": type(validator).__name__,
                    "error_kind": e.kind.value,
                }
            )
            raise


def validate_all(claims: Any, *validators: Validation) -> list[ClaimValidationError]:
    """Run every validator and collect the failures.

    Args:
        claims: Decoded payload.
        *validators: Validators to apply.

    Returns:
        Failures in validator order; empty when all pass.
    """
    failures: list[ClaimValidationError] = []
    for validator in validators:
        try:
            validator.validate(claims)
        except ClaimValidationError as e:
            failures.append(e)
    return failures
