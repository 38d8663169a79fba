"""JWS signature algorithms (RFC 7518 Section 3, RFC 8037).

An algorithm is any object exposing the Algorithm protocol:

    name                          JOSE "alg" identifier
    sign(signing_input, key)      -> signature bytes
    verify(signing_input, sig, key) -> None, raises InvalidSignatureError

The codec treats built-in and third-party algorithms identically; it
never switches on algorithm names. The name written into the header by
encode() and the name checked by VerifyWithKey both come from the same
algorithm object.

Key types:
    HMAC     bytes or str secret, same value signs and verifies
    RSA/PSS  RSAPrivateKey signs, RSAPublicKey verifies (>= 2048 bits)
    ECDSA    EllipticCurvePrivateKey / PublicKey on the algorithm's curve
    EdDSA    Ed25519PrivateKey / Ed25519PublicKey
Asymmetric keys may also be passed as PEM text.

Failure mapping:
    sign   wrong key type or primitive failure   -> SigningError
    verify wrong key type                        -> InvalidKeyError
    verify bad, truncated or malformed signature -> InvalidSignatureError
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from compact_jwt.constants import FORBIDDEN_HMAC_KEY_PREFIXES, MIN_RSA_KEY_SIZE
from compact_jwt.exceptions import (
    InvalidKeyError,
    InvalidSignatureError,
    SigningError,
    UnsupportedAlgorithmError,
)
from compact_jwt.jws.keys import load_private_key, load_public_key

__all__ = [
    "Algorithm",
    "AlgorithmRegistry",
    "ECDSAAlgorithm",
    "EdDSAAlgorithm",
    "HMACAlgorithm",
    "RSAAlgorithm",
    "BUILTIN_ALGORITHMS",
    "DEFAULT_REGISTRY",
    "get_algorithm",
    "HS256",
    "HS384",
    "HS512",
    "RS256",
    "RS384",
    "RS512",
    "PS256",
    "PS384",
    "PS512",
    "ES256",
    "ES384",
    "EdDSA",
]

_VERIFICATION_FAILED = "Signature verification failed"


@runtime_checkable
class Algorithm(Protocol):
    """Protocol for JWS signature algorithms.

    Implementations must be stateless: the same object is shared across
    threads and tokens.
    """

    name: str

    def sign(self, signing_input: bytes, key: Any) -> bytes:
        """Sign the signing input.

        Raises:
            SigningError: If the key does not fit or the primitive fails.
        """
        ...

    def verify(self, signing_input: bytes, signature: bytes, key: Any) -> None:
        """Verify a signature over the signing input.

        Raises:
            InvalidSignatureError: On any mismatch or malformed signature.
            InvalidKeyError: If the key does not fit the algorithm.
        """
        ...


# =============================================================================
# HMAC (HS256 / HS384 / HS512)
# =============================================================================


@dataclass(frozen=True)
class HMACAlgorithm:
    """HMAC with a SHA-2 hash. Symmetric: one secret signs and verifies."""

    name: str
    hash_algorithm: hashes.HashAlgorithm

    def _prepare_key(self, key: Any, error: type[Exception]) -> bytes:
        if isinstance(key, str):
            key = key.encode("utf-8")
        if not isinstance(key, (bytes, bytearray)):
            raise error(f"{self.name} requires a bytes or str secret, got {type(key).__name__}")
        secret = bytes(key)
        if not secret:
            raise error(f"{self.name} secret must not be empty")
        if secret.lstrip().startswith(FORBIDDEN_HMAC_KEY_PREFIXES):
            raise error(f"{self.name} secret looks like a public key and cannot be used as an HMAC secret")
        return secret

    def _mac(self, signing_input: bytes, secret: bytes) -> crypto_hmac.HMAC:
        mac = crypto_hmac.HMAC(secret, self.hash_algorithm)
        mac.update(signing_input)
        return mac

    def sign(self, signing_input: bytes, key: Any) -> bytes:
        secret = self._prepare_key(key, SigningError)
        return self._mac(signing_input, secret).finalize()

    def verify(self, signing_input: bytes, signature: bytes, key: Any) -> None:
        secret = self._prepare_key(key, InvalidKeyError)
        try:
            # Constant-time comparison inside cryptography
            self._mac(signing_input, secret).verify(signature)
        except InvalidSignature as e:
            raise InvalidSignatureError(_VERIFICATION_FAILED) from e


# =============================================================================
# RSA (RS256-512 PKCS#1 v1.5, PS256-512 PSS)
# =============================================================================


@dataclass(frozen=True)
class RSAAlgorithm:
    """RSASSA-PKCS1-v1_5 or RSASSA-PSS with a SHA-2 hash.

    PSS uses MGF1 with the same hash and a salt as long as the digest
    (RFC 7518 Section 3.5).
    """

    name: str
    hash_algorithm: hashes.HashAlgorithm
    scheme: Literal["pkcs1v15", "pss"] = "pkcs1v15"

    def _padding(self) -> padding.AsymmetricPadding:
        if self.scheme == "pss":
            return padding.PSS(
                mgf=padding.MGF1(self.hash_algorithm),
                salt_length=self.hash_algorithm.digest_size,
            )
        return padding.PKCS1v15()

    def sign(self, signing_input: bytes, key: Any) -> bytes:
        if isinstance(key, (bytes, str)):
            try:
                key = load_private_key(key)
            except InvalidKeyError as e:
                raise SigningError(str(e)) from e
        if not isinstance(key, rsa.RSAPrivateKey):
            raise SigningError(f"{self.name} requires an RSA private key, got {type(key).__name__}")
        if key.key_size < MIN_RSA_KEY_SIZE:
            raise SigningError(f"{self.name} requires an RSA key of at least {MIN_RSA_KEY_SIZE} bits")
        try:
            return key.sign(signing_input, self._padding(), self.hash_algorithm)
        except ValueError as e:
            raise SigningError(f"{self.name} signing failed: {e}") from e

    def verify(self, signing_input: bytes, signature: bytes, key: Any) -> None:
        if isinstance(key, (bytes, str)):
            key = load_public_key(key)
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidKeyError(f"{self.name} requires an RSA public key, got {type(key).__name__}")
        if key.key_size < MIN_RSA_KEY_SIZE:
            raise InvalidKeyError(f"{self.name} requires an RSA key of at least {MIN_RSA_KEY_SIZE} bits")
        try:
            key.verify(signature, signing_input, self._padding(), self.hash_algorithm)
        except (InvalidSignature, ValueError) as e:
            raise InvalidSignatureError(_VERIFICATION_FAILED) from e


# =============================================================================
# ECDSA (ES256 / ES384)
# =============================================================================


@dataclass(frozen=True)
class ECDSAAlgorithm:
    """ECDSA with the JOSE fixed-width R || S signature encoding.

    cryptography produces and consumes DER signatures; conversion happens
    here so the wire form matches RFC 7518 Section 3.4.
    """

    name: str
    hash_algorithm: hashes.HashAlgorithm
    curve_name: str
    coordinate_size: int

    def _check_curve(self, key: ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey) -> bool:
        return key.curve.name == self.curve_name

    def sign(self, signing_input: bytes, key: Any) -> bytes:
        if isinstance(key, (bytes, str)):
            try:
                key = load_private_key(key)
            except InvalidKeyError as e:
                raise SigningError(str(e)) from e
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise SigningError(f"{self.name} requires an EC private key, got {type(key).__name__}")
        if not self._check_curve(key):
            raise SigningError(f"{self.name} requires a {self.curve_name} key, got {key.curve.name}")

        der_signature = key.sign(signing_input, ec.ECDSA(self.hash_algorithm))
        r, s = decode_dss_signature(der_signature)
        return r.to_bytes(self.coordinate_size, "big") + s.to_bytes(self.coordinate_size, "big")

    def verify(self, signing_input: bytes, signature: bytes, key: Any) -> None:
        if isinstance(key, (bytes, str)):
            key = load_public_key(key)
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise InvalidKeyError(f"{self.name} requires an EC public key, got {type(key).__name__}")
        if not self._check_curve(key):
            raise InvalidKeyError(f"{self.name} requires a {self.curve_name} key, got {key.curve.name}")

        if len(signature) != 2 * self.coordinate_size:
            raise InvalidSignatureError(_VERIFICATION_FAILED)

        r = int.from_bytes(signature[: self.coordinate_size], "big")
        s = int.from_bytes(signature[self.coordinate_size :], "big")
        try:
            key.verify(encode_dss_signature(r, s), signing_input, ec.ECDSA(self.hash_algorithm))
        except (InvalidSignature, ValueError) as e:
            raise InvalidSignatureError(_VERIFICATION_FAILED) from e


# =============================================================================
# EdDSA (Ed25519)
# =============================================================================


@dataclass(frozen=True)
class EdDSAAlgorithm:
    """EdDSA over Ed25519 (RFC 8037)."""

    name: str = "EdDSA"

    def sign(self, signing_input: bytes, key: Any) -> bytes:
        if isinstance(key, (bytes, str)):
            try:
                key = load_private_key(key)
            except InvalidKeyError as e:
                raise SigningError(str(e)) from e
        if not isinstance(key, ed25519.Ed25519PrivateKey):
            raise SigningError(f"{self.name} requires an Ed25519 private key, got {type(key).__name__}")
        return key.sign(signing_input)

    def verify(self, signing_input: bytes, signature: bytes, key: Any) -> None:
        if isinstance(key, (bytes, str)):
            key = load_public_key(key)
        if not isinstance(key, ed25519.Ed25519PublicKey):
            raise InvalidKeyError(f"{self.name} requires an Ed25519 public key, got {type(key).__name__}")
        try:
            key.verify(signature, signing_input)
        except (InvalidSignature, ValueError) as e:
            raise InvalidSignatureError(_VERIFICATION_FAILED) from e


# =============================================================================
# Built-in algorithms
# =============================================================================

HS256 = HMACAlgorithm("HS256", hashes.SHA256())
HS384 = HMACAlgorithm("HS384", hashes.SHA384())
HS512 = HMACAlgorithm("HS512", hashes.SHA512())

RS256 = RSAAlgorithm("RS256", hashes.SHA256())
RS384 = RSAAlgorithm("RS384", hashes.SHA384())
RS512 = RSAAlgorithm("RS512", hashes.SHA512())

PS256 = RSAAlgorithm("PS256", hashes.SHA256(), scheme="pss")
PS384 = RSAAlgorithm("PS384", hashes.SHA384(), scheme="pss")
PS512 = RSAAlgorithm("PS512", hashes.SHA512(), scheme="pss")

ES256 = ECDSAAlgorithm("ES256", hashes.SHA256(), curve_name="secp256r1", coordinate_size=32)
ES384 = ECDSAAlgorithm("ES384", hashes.SHA384(), curve_name="secp384r1", coordinate_size=48)

EdDSA = EdDSAAlgorithm()

BUILTIN_ALGORITHMS: tuple[Algorithm, ...] = (
    HS256,
    HS384,
    HS512,
    RS256,
    RS384,
    RS512,
    PS256,
    PS384,
    PS512,
    ES256,
    ES384,
    EdDSA,
)


class AlgorithmRegistry:
    """Immutable mapping from JOSE algorithm names to algorithm objects.

    Used where an algorithm must be picked by name (key resolvers, CLI).
    Extending produces a new registry; registries are never mutated, so a
    shared registry is safe across threads.

    Usage:
        registry = DEFAULT_REGISTRY.with_algorithms(MyAlgorithm("XS256"))
        algorithm = registry.get(header.alg)
    """

    def __init__(self, algorithms: Iterable[Algorithm]) -> None:
        """Build a registry.

        Args:
            algorithms: Algorithm objects; names must be unique.

        Raises:
            ValueError: If two algorithms share a name.
        """
        mapping: dict[str, Algorithm] = {}
        for algorithm in algorithms:
            if algorithm.name in mapping:
                raise ValueError(f"Duplicate algorithm name: {algorithm.name!r}")
            mapping[algorithm.name] = algorithm
        self._algorithms = MappingProxyType(mapping)

    def get(self, name: str | None) -> Algorithm:
        """Look up an algorithm by JOSE name.

        Raises:
            UnsupportedAlgorithmError: If the name is not registered.
        """
        if name is None or name not in self._algorithms:
            raise UnsupportedAlgorithmError(str(name))
        return self._algorithms[name]

    def with_algorithms(self, *algorithms: Algorithm) -> AlgorithmRegistry:
        """Return a new registry with additional algorithms."""
        return AlgorithmRegistry([*self._algorithms.values(), *algorithms])

    @property
    def names(self) -> tuple[str, ...]:
        """Registered algorithm names, in registration order."""
        return tuple(self._algorithms)

    def __contains__(self, name: object) -> bool:
        return name in self._algorithms

    def __iter__(self) -> Iterator[Algorithm]:
        return iter(self._algorithms.values())

    def __len__(self) -> int:
        return len(self._algorithms)


DEFAULT_REGISTRY = AlgorithmRegistry(BUILTIN_ALGORITHMS)


def get_algorithm(name: str | None) -> Algorithm:
    """Look up a built-in algorithm by JOSE name.

    Raises:
        UnsupportedAlgorithmError: If the name is not a built-in algorithm.
    """
    return DEFAULT_REGISTRY.get(name)
