"""compact-jwt: JWS compact serialization and JWT claim validation.

Quick start:
    from compact_jwt import HS256, Claims, ExpiredTime, VerifyWithKey, decode, encode, validate

    token = encode(None, Claims(iss="auth.example.com").issued_now().expires_in(3600), HS256, secret)
    decoded = decode(token, VerifyWithKey(HS256, secret), payload_type=Claims)
    validate(decoded.payload, ExpiredTime(leeway=30))
"""

__version__ = "0.1.0"

from compact_jwt.claims import Claims
from compact_jwt.config import ValidationConfig
from compact_jwt.exceptions import (
    AlgorithmMismatchError,
    ClaimMismatchError,
    ClaimValidationError,
    EncodingError,
    ErrorKind,
    ExpiredError,
    FutureIssuedAtError,
    InvalidClaimError,
    InvalidHeaderError,
    InvalidKeyError,
    InvalidPayloadError,
    InvalidSignatureError,
    JWTError,
    KeyResolutionError,
    MalformedTokenError,
    NotYetValidError,
    SigningError,
    UnsupportedAlgorithmError,
)
from compact_jwt.jws import (
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
    CustomVerify,
    EdDSA,
    Header,
    NoVerify,
    Token,
    VerificationStrategy,
    VerifyWithKey,
    VerifyWithKeyResolver,
    decode,
    encode,
    get_algorithm,
    get_unverified_header,
    load_private_key,
    load_public_key,
    verify_with_any,
)
from compact_jwt.validation import (
    AudienceContains,
    ExpectAud,
    ExpectClaim,
    ExpectIss,
    ExpectJti,
    ExpectSub,
    ExpiredTime,
    IssuedAtTime,
    NotBeforeTime,
    Validation,
    validate,
    validate_all,
)

__all__ = [
    "__version__",
    # Codec
    "decode",
    "encode",
    "get_unverified_header",
    "Header",
    "Token",
    "Claims",
    # Algorithms
    "Algorithm",
    "AlgorithmRegistry",
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
    "load_private_key",
    "load_public_key",
    # Verification
    "CustomVerify",
    "NoVerify",
    "VerificationStrategy",
    "VerifyWithKey",
    "VerifyWithKeyResolver",
    "verify_with_any",
    # Validation
    "AudienceContains",
    "ExpectAud",
    "ExpectClaim",
    "ExpectIss",
    "ExpectJti",
    "ExpectSub",
    "ExpiredTime",
    "IssuedAtTime",
    "NotBeforeTime",
    "Validation",
    "ValidationConfig",
    "validate",
    "validate_all",
    # Errors
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
