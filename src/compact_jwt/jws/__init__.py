"""JWS compact serialization: algorithms, header, codec and verification."""

from compact_jwt.jws.algorithms import (
    BUILTIN_ALGORITHMS,
    DEFAULT_REGISTRY,
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
    AlgorithmRegistry,
    ECDSAAlgorithm,
    EdDSA,
    EdDSAAlgorithm,
    HMACAlgorithm,
    RSAAlgorithm,
    get_algorithm,
)
from compact_jwt.jws.codec import decode, encode, get_unverified_header
from compact_jwt.jws.header import Header
from compact_jwt.jws.keys import load_private_key, load_public_key
from compact_jwt.jws.token import Token
from compact_jwt.jws.verification import (
    CustomVerify,
    KeyResolver,
    NoVerify,
    VerificationStrategy,
    Verifier,
    VerifyWithKey,
    VerifyWithKeyResolver,
    verify_with_any,
)

__all__ = [
    # Algorithms
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
    # Codec
    "Header",
    "Token",
    "decode",
    "encode",
    "get_unverified_header",
    # Keys
    "load_private_key",
    "load_public_key",
    # Verification
    "CustomVerify",
    "KeyResolver",
    "NoVerify",
    "VerificationStrategy",
    "Verifier",
    "VerifyWithKey",
    "VerifyWithKeyResolver",
    "verify_with_any",
]
