"""Shared fixtures: key material for every built-in algorithm family.

Asymmetric keys are generated once per session; RSA generation is the
slow part of the suite.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from compact_jwt.jws.algorithms import (
    ES256,
    ES384,
    HS256,
    HS384,
    HS512,
    PS256,
    PS384,
    PS512,
    RS256,
    RS384,
    RS512,
    Algorithm,
    EdDSA,
)

HMAC_SECRET = b"k" * 64


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """2048-bit RSA key for RS*/PS* tests."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_p256_private_key() -> ec.EllipticCurvePrivateKey:
    """P-256 key for ES256."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_p384_private_key() -> ec.EllipticCurvePrivateKey:
    """P-384 key for ES384."""
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ed25519_private_key() -> ed25519.Ed25519PrivateKey:
    """Ed25519 key for EdDSA."""
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def rsa_public_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    """PEM SubjectPublicKeyInfo of the RSA test key."""
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def rsa_private_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    """PEM PKCS#8 of the RSA test key."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def key_pairs(
    rsa_private_key: rsa.RSAPrivateKey,
    ec_p256_private_key: ec.EllipticCurvePrivateKey,
    ec_p384_private_key: ec.EllipticCurvePrivateKey,
    ed25519_private_key: ed25519.Ed25519PrivateKey,
) -> dict[str, tuple[Algorithm, object, object]]:
    """(algorithm, signing key, verification key) for every built-in algorithm."""
    rsa_public = rsa_private_key.public_key()
    return {
        "HS256": (HS256, HMAC_SECRET, HMAC_SECRET),
        "HS384": (HS384, HMAC_SECRET, HMAC_SECRET),
        "HS512": (HS512, HMAC_SECRET, HMAC_SECRET),
        "RS256": (RS256, rsa_private_key, rsa_public),
        "RS384": (RS384, rsa_private_key, rsa_public),
        "RS512": (RS512, rsa_private_key, rsa_public),
        "PS256": (PS256, rsa_private_key, rsa_public),
        "PS384": (PS384, rsa_private_key, rsa_public),
        "PS512": (PS512, rsa_private_key, rsa_public),
        "ES256": (ES256, ec_p256_private_key, ec_p256_private_key.public_key()),
        "ES384": (ES384, ec_p384_private_key, ec_p384_private_key.public_key()),
        "EdDSA": (EdDSA, ed25519_private_key, ed25519_private_key.public_key()),
    }
