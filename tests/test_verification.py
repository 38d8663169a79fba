"""Tests for verification strategies.

Tests cover:
- VerifyWithKey algorithm pinning and algorithm-confusion resistance
- VerifyWithKeyResolver key selection and failure wrapping
- CustomVerify return and exception semantics
- verify_with_any for key rotation
"""

from __future__ import annotations

import dataclasses
import hashlib
import hmac
import logging
from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from compact_jwt.claims import Claims
from compact_jwt.exceptions import (
    AlgorithmMismatchError,
    ExpiredError,
    InvalidKeyError,
    InvalidSignatureError,
    KeyResolutionError,
    UnsupportedAlgorithmError,
)
from compact_jwt.jws.algorithms import DEFAULT_REGISTRY, HS256, HS512, RS256
from compact_jwt.jws.codec import decode, encode
from compact_jwt.jws.header import Header
from compact_jwt.jws.verification import (
    CustomVerify,
    NoVerify,
    VerifyWithKey,
    VerifyWithKeyResolver,
    verify_with_any,
)
from compact_jwt.telemetry.system_logger import SYSTEM_LOGGER_NAME
from compact_jwt.utils.encoding import b64url_encode, to_json

OLD_SECRET = b"o" * 64
NEW_SECRET = b"n" * 64


@pytest.fixture
def token() -> str:
    """HS256 token signed with NEW_SECRET, kid "new"."""
    return encode(Header(kid="new"), Claims(iss="auth.example.com", sub="user-42"), HS256, NEW_SECRET)


def _forge(header: dict, payload: dict, mac_key: bytes) -> str:
    """Build an HS256-style token with an arbitrary header, MACed with raw bytes."""
    signing_input = f"{b64url_encode(to_json(header))}.{b64url_encode(to_json(payload))}"
    signature = hmac.new(mac_key, signing_input.encode("ascii"), hashlib.sha256).digest()
    return f"{signing_input}.{b64url_encode(signature)}"


# ============================================================================
# Tests: VerifyWithKey
# ============================================================================


class TestVerifyWithKey:
    """Tests for pinned-algorithm verification."""

    def test_accepts_matching_algorithm_and_key(self, token: str):
        """Given the right algorithm and key, the token is verified."""
        decoded = decode(token, VerifyWithKey(HS256, NEW_SECRET))

        assert decoded.verified is True

    def test_rejects_other_algorithm(self, token: str):
        """Given a token declaring HS256 and a verifier pinned to HS512, AlgorithmMismatchError is raised."""
        with pytest.raises(AlgorithmMismatchError) as exc_info:
            decode(token, VerifyWithKey(HS512, NEW_SECRET))

        assert exc_info.value.expected == "HS512"
        assert exc_info.value.actual == "HS256"

    def test_hs256_forged_with_rsa_public_key_rejected_by_rs256(
        self, rsa_private_key: rsa.RSAPrivateKey, rsa_public_pem: bytes
    ):
        """Given an HS256 token MACed with the RSA public key PEM, an RS256 verifier rejects it."""
        # Arrange
        forged = _forge({"alg": "HS256", "typ": "JWT"}, {"sub": "admin"}, rsa_public_pem)

        # Act & Assert
        with pytest.raises(AlgorithmMismatchError):
            decode(forged, VerifyWithKey(RS256, rsa_private_key.public_key()))

    def test_rsa_public_pem_never_accepted_as_hmac_secret(self, rsa_public_pem: bytes):
        """Given an HS256 verifier misconfigured with a public key PEM, InvalidKeyError is raised."""
        forged = _forge({"alg": "HS256", "typ": "JWT"}, {"sub": "admin"}, rsa_public_pem)

        with pytest.raises(InvalidKeyError):
            decode(forged, VerifyWithKey(HS256, rsa_public_pem))

    def test_alg_none_rejected(self):
        """Given a token declaring "none", AlgorithmMismatchError is raised."""
        forged = _forge({"alg": "none"}, {"sub": "admin"}, b"ignored")

        with pytest.raises(AlgorithmMismatchError):
            decode(forged, VerifyWithKey(HS256, NEW_SECRET))

    def test_repr_hides_key(self):
        """The key does not appear in the strategy's repr."""
        assert "hunter2" not in repr(VerifyWithKey(HS256, "hunter2"))

    def test_strategies_are_frozen(self):
        """Strategies cannot be mutated after construction."""
        strategy = VerifyWithKey(HS256, NEW_SECRET)

        with pytest.raises(dataclasses.FrozenInstanceError):
            strategy.key = OLD_SECRET  # type: ignore[misc]


# ============================================================================
# Tests: VerifyWithKeyResolver
# ============================================================================


class TestVerifyWithKeyResolver:
    """Tests for resolver-based verification."""

    def test_resolves_key_by_kid(self, token: str):
        """Given a resolver keyed on kid, the matching key verifies the token."""
        # Arrange
        keys = {"old": OLD_SECRET, "new": NEW_SECRET}

        def resolver(header: Header, payload: Any):
            return HS256, keys[header.kid]

        # Act
        decoded = decode(token, VerifyWithKeyResolver(resolver))

        # Assert
        assert decoded.verified is True

    def test_resolver_receives_typed_payload(self, token: str):
        """Given payload_type=Claims, the resolver sees a Claims instance."""
        seen: list[Any] = []

        def resolver(header: Header, payload: Any):
            seen.append(payload)
            return HS256, NEW_SECRET

        decode(token, VerifyWithKeyResolver(resolver), payload_type=Claims)

        assert isinstance(seen[0], Claims)
        assert seen[0].iss == "auth.example.com"

    def test_resolver_exception_becomes_key_resolution_error(self, token: str):
        """Given a resolver raising KeyError, KeyResolutionError is raised with the cause chained."""
        def resolver(header: Header, payload: Any):
            return HS256, {}[header.kid]

        with pytest.raises(KeyResolutionError) as exc_info:
            decode(token, VerifyWithKeyResolver(resolver))

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_resolver_registry_lookup_of_unknown_alg(self):
        """Given a resolver looking up "none" in the registry, KeyResolutionError wraps the lookup failure."""
        forged = _forge({"alg": "none"}, {"sub": "admin"}, b"ignored")

        def resolver(header: Header, payload: Any):
            return DEFAULT_REGISTRY.get(header.alg), NEW_SECRET

        with pytest.raises(KeyResolutionError) as exc_info:
            decode(forged, VerifyWithKeyResolver(resolver))

        assert isinstance(exc_info.value.__cause__, UnsupportedAlgorithmError)

    def test_resolved_algorithm_must_match_header(self, token: str):
        """Given a resolver choosing HS512 for an HS256 token, AlgorithmMismatchError is raised."""
        with pytest.raises(AlgorithmMismatchError):
            decode(token, VerifyWithKeyResolver(lambda header, payload: (HS512, NEW_SECRET)))

    def test_resolver_returning_non_algorithm(self, token: str):
        """Given a resolver returning a name instead of an algorithm, KeyResolutionError is raised."""
        with pytest.raises(KeyResolutionError):
            decode(token, VerifyWithKeyResolver(lambda header, payload: ("HS256", NEW_SECRET)))

    def test_resolver_returning_wrong_key(self, token: str):
        """Given a resolver returning a different secret, InvalidSignatureError is raised."""
        with pytest.raises(InvalidSignatureError):
            decode(token, VerifyWithKeyResolver(lambda header, payload: (HS256, OLD_SECRET)))

    def test_resolver_failure_is_logged(self, token: str, caplog: pytest.LogCaptureFixture):
        """Given a failing resolver, a key_resolution_failed event carries the kid."""
        caplog.set_level(logging.DEBUG, logger=SYSTEM_LOGGER_NAME)

        def resolver(header: Header, payload: Any):
            raise LookupError("no such key")

        with pytest.raises(KeyResolutionError):
            decode(token, VerifyWithKeyResolver(resolver))

        events = [record.msg for record in caplog.records if isinstance(record.msg, dict)]
        failed = next(event for event in events if event["event"] == "key_resolution_failed")
        assert failed["kid"] == "new"
        assert failed["error_type"] == "LookupError"


# ============================================================================
# Tests: CustomVerify
# ============================================================================


class TestCustomVerify:
    """Tests for caller-supplied verifiers."""

    def test_returning_none_accepts(self, token: str):
        """Given a verifier that returns None, the token is accepted as verified."""
        decoded = decode(token, CustomVerify(lambda signing_input, signature, header, payload: None))

        assert decoded.verified is True

    def test_returning_false_rejects(self, token: str):
        """Given a verifier that returns False, InvalidSignatureError is raised."""
        with pytest.raises(InvalidSignatureError):
            decode(token, CustomVerify(lambda signing_input, signature, header, payload: False))

    def test_receives_raw_signing_input_and_signature(self, token: str):
        """Given a verifier, it receives the raw segments and decoded signature bytes."""
        # Arrange
        calls: list[tuple] = []

        def verifier(signing_input: bytes, signature: bytes, header: Header, payload: Any) -> bool:
            calls.append((signing_input, signature, header.kid, payload))
            return True

        # Act
        decode(token, CustomVerify(verifier))

        # Assert
        header_segment, payload_segment, _ = token.split(".")
        signing_input, signature, kid, payload = calls[0]
        assert signing_input == f"{header_segment}.{payload_segment}".encode("ascii")
        assert signature == HS256.sign(signing_input, NEW_SECRET)
        assert kid == "new"
        assert payload == {"iss": "auth.example.com", "sub": "user-42"}

    def test_jwt_error_propagates_unchanged(self, token: str):
        """Given a verifier raising ExpiredError, the same error reaches the caller."""
        error = ExpiredError(1)

        def verifier(signing_input: bytes, signature: bytes, header: Header, payload: Any) -> bool:
            raise error

        with pytest.raises(ExpiredError) as exc_info:
            decode(token, CustomVerify(verifier))

        assert exc_info.value is error

    def test_other_exception_becomes_key_resolution_error(self, token: str):
        """Given a verifier raising RuntimeError, KeyResolutionError is raised."""
        def verifier(signing_input: bytes, signature: bytes, header: Header, payload: Any) -> bool:
            raise RuntimeError("HSM offline")

        with pytest.raises(KeyResolutionError, match="HSM offline"):
            decode(token, CustomVerify(verifier))

    def test_no_verify_marks_token_unverified(self, token: str):
        """Given NoVerify, the token is returned with verified False."""
        assert decode(token, NoVerify()).verified is False


# ============================================================================
# Tests: verify_with_any
# ============================================================================


class TestVerifyWithAny:
    """Tests for multi-key verification."""

    def test_accepts_token_signed_with_any_candidate(self, token: str):
        """Given old and new secrets, a token signed with the new one verifies."""
        strategy = verify_with_any([(HS256, OLD_SECRET), (HS256, NEW_SECRET)])

        assert decode(token, strategy).verified is True

    def test_mixed_families(self, rsa_private_key: rsa.RSAPrivateKey):
        """Given HMAC and RSA candidates, an RS256 token verifies with the RSA key."""
        rs_token = encode(None, {"sub": "x"}, RS256, rsa_private_key)
        strategy = verify_with_any([(HS256, NEW_SECRET), (RS256, rsa_private_key.public_key())])

        assert decode(rs_token, strategy).payload == {"sub": "x"}

    def test_no_candidate_for_declared_algorithm(self, token: str):
        """Given only HS512 candidates, an HS256 token raises AlgorithmMismatchError."""
        with pytest.raises(AlgorithmMismatchError):
            decode(token, verify_with_any([(HS512, NEW_SECRET)]))

    def test_no_candidate_verifies(self, token: str):
        """Given only wrong secrets, InvalidSignatureError is raised."""
        with pytest.raises(InvalidSignatureError):
            decode(token, verify_with_any([(HS256, OLD_SECRET), (HS256, b"x" * 64)]))

    def test_requires_candidates(self):
        """Given no candidates, ValueError is raised."""
        with pytest.raises(ValueError):
            verify_with_any([])
