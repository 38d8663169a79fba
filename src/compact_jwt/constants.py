"""Library-wide constants for compact-jwt.

Constants that define wire-format behavior.
For per-deployment claim validation settings, see config.py.
"""

# ============================================================================
# JOSE Header (RFC 7515 Section 4.1)
# ============================================================================

# Default "typ" written into headers created by the caller
DEFAULT_TOKEN_TYPE: str = "JWT"

# Registered header parameters modeled as explicit Header fields.
# Order matters: it is the order parameters appear on the wire.
REGISTERED_HEADER_PARAMETERS: tuple[str, ...] = (
    "typ",
    "alg",
    "cty",
    "jku",
    "kid",
    "x5u",
    "x5t",
)

# ============================================================================
# JWT Claims (RFC 7519 Section 4.1)
# ============================================================================

# Registered claim names, in wire order
REGISTERED_CLAIMS: tuple[str, ...] = (
    "iss",
    "sub",
    "aud",
    "exp",
    "nbf",
    "iat",
    "jti",
)

# ============================================================================
# Compact Serialization
# ============================================================================

# header.payload.signature
SEGMENT_COUNT: int = 3
SEGMENT_SEPARATOR: str = "."

# Canonical JSON separators (no whitespace)
JSON_SEPARATORS: tuple[str, str] = (",", ":")

# ============================================================================
# Claim Validation
# ============================================================================

# Clock skew tolerance bounds (seconds)
DEFAULT_LEEWAY_SECONDS: int = 0
MAX_LEEWAY_SECONDS: int = 300  # 5 minutes

# ============================================================================
# HMAC Key Hardening
# ============================================================================

# Public key encodings rejected as HMAC secrets
FORBIDDEN_HMAC_KEY_PREFIXES: tuple[bytes, ...] = (
    b"-----BEGIN PUBLIC KEY-----",
    b"-----BEGIN CERTIFICATE-----",
    b"-----BEGIN RSA PUBLIC KEY-----",
    b"ssh-rsa",
    b"ssh-ed25519",
    b"ecdsa-sha2-",
)

# ============================================================================
# RSA Key Size
# ============================================================================

# Smallest RSA modulus accepted for signing or verification (bits)
MIN_RSA_KEY_SIZE: int = 2048
