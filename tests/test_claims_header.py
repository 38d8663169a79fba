"""Tests for the Header and Claims models.

Tests cover:
- Header defaults, extras, wire form and decoding without defaults
- Claims wire order, extras and strict NumericDate fields
- Claims builder helpers
- Token value object
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from compact_jwt.claims import Claims
from compact_jwt.constants import REGISTERED_CLAIMS, REGISTERED_HEADER_PARAMETERS
from compact_jwt.jws.header import Header
from compact_jwt.jws.token import Token


# ============================================================================
# Tests: Header
# ============================================================================


class TestHeader:
    """Tests for the Header model."""

    def test_registered_parameters_in_wire_order(self):
        """Header fields are the registered parameters, in wire order."""
        assert tuple(Header.model_fields) == REGISTERED_HEADER_PARAMETERS

    def test_default_typ_is_jwt(self):
        """Given no arguments, typ is "JWT" and alg is unset."""
        header = Header()

        assert header.typ == "JWT"
        assert header.alg is None
        assert header.to_wire() == {"typ": "JWT"}

    def test_with_algorithm_returns_copy(self):
        """Given with_algorithm, a new header is returned and the original is unchanged."""
        header = Header(kid="k1")

        signed = header.with_algorithm("ES256")

        assert signed.alg == "ES256"
        assert signed.kid == "k1"
        assert header.alg is None

    def test_header_is_frozen(self):
        """Given an attempt to set a field, ValidationError is raised."""
        header = Header()

        with pytest.raises(ValidationError):
            header.kid = "k2"  # type: ignore[misc]

    def test_extra_parameters(self):
        """Given unregistered parameters, they are kept as extras."""
        header = Header(crit=["exp"], tenant="acme")

        assert header.extra == {"crit": ["exp"], "tenant": "acme"}
        assert header.get("tenant") == "acme"
        assert header.get("missing", "default") == "default"

    def test_null_extra_parameter_kept_in_wire_form(self):
        """Given an extra parameter set to None, to_wire keeps it while unset registered ones are dropped."""
        header = Header(x5c=None)

        assert header.to_wire() == {"typ": "JWT", "x5c": None}

    def test_get_registered_parameter(self):
        """Given a registered parameter that is unset, get returns the default."""
        header = Header(kid="k1")

        assert header.get("kid") == "k1"
        assert header.get("cty", "none") == "none"

    def test_from_wire_keeps_absent_typ(self):
        """Given wire data without typ, typ stays None."""
        header = Header.from_wire({"alg": "HS256", "kid": "k1"})

        assert header.typ is None
        assert header.to_wire() == {"alg": "HS256", "kid": "k1"}

    def test_from_wire_rejects_wrong_type(self):
        """Given a non-string x5t, ValidationError is raised."""
        with pytest.raises(ValidationError):
            Header.from_wire({"alg": "HS256", "x5t": 123})


# ============================================================================
# Tests: Claims
# ============================================================================


class TestClaims:
    """Tests for the Claims model."""

    def test_registered_claims_in_wire_order(self):
        """Claims fields are the registered claims, in wire order."""
        assert tuple(Claims.model_fields) == REGISTERED_CLAIMS

    def test_wire_form_omits_none_and_keeps_order(self):
        """Given a subset of claims, only set claims are dumped in registered order."""
        claims = Claims(jti="id-1", iat=10, sub="user-42", iss="auth", team="core")

        dumped = claims.model_dump(mode="json", exclude_none=True)

        assert list(dumped) == ["iss", "sub", "iat", "jti", "team"]

    def test_extra_claims(self):
        """Given custom claims, they are exposed through extra."""
        assert Claims(sub="x", role="admin").extra == {"role": "admin"}

    def test_to_wire_keeps_null_custom_claims(self):
        """Given a custom claim set to None, to_wire keeps it and drops unset registered claims."""
        claims = Claims(iss="a", note=None)

        assert claims.to_wire() == {"iss": "a", "note": None}
        assert list(Claims(jti="id-1", sub="user-42", team="core").to_wire()) == ["sub", "jti", "team"]

    @pytest.mark.parametrize("value", ["100", 1.0, True, -5], ids=["string", "float", "bool", "negative"])
    def test_time_claims_are_strict_non_negative_ints(self, value):
        """Given anything but a non-negative int for exp, ValidationError is raised."""
        with pytest.raises(ValidationError):
            Claims(exp=value)

    def test_issued_now(self):
        """Given issued_now, iat is the current time and the original is unchanged."""
        original = Claims(sub="x")
        before = int(datetime.now(timezone.utc).timestamp())

        claims = original.issued_now()

        assert before <= claims.iat <= before + 2
        assert original.iat is None

    def test_expires_in_seconds_and_timedelta(self):
        """Given seconds or a timedelta, exp is set relative to now."""
        by_seconds = Claims().expires_in(60)
        by_delta = Claims().expires_in(timedelta(minutes=1))

        assert abs(by_seconds.exp - by_delta.exp) <= 1

    def test_expires_at_and_not_before(self):
        """Given datetimes, exp and nbf are their NumericDates."""
        moment = datetime(2030, 1, 1, tzinfo=timezone.utc)

        claims = Claims().expires_at(moment).not_before(moment - timedelta(hours=1))

        assert claims.exp == 1893456000
        assert claims.nbf == 1893456000 - 3600


# ============================================================================
# Tests: Token
# ============================================================================


class TestToken:
    """Tests for the decoded token value."""

    def test_token_is_frozen(self):
        """Given an attempt to flip verified, FrozenInstanceError is raised."""
        token = Token(header=Header(alg="HS256"), payload={"sub": "x"}, verified=False)

        with pytest.raises(dataclasses.FrozenInstanceError):
            token.verified = True  # type: ignore[misc]

    def test_verified_defaults_to_true(self):
        """Given no verified argument, the token is marked verified."""
        assert Token(header=Header(), payload=None).verified is True
