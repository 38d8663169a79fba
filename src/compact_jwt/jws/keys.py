"""PEM key loading for the asymmetric algorithms.

Thin wrappers over cryptography's serialization module that translate
loader failures into InvalidKeyError. Key management (rotation, JWK
sets) is out of scope; these only turn PEM text into key objects.
"""

from __future__ import annotations

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes, PublicKeyTypes

from compact_jwt.exceptions import InvalidKeyError

__all__ = [
    "load_private_key",
    "load_public_key",
]

_CERTIFICATE_PREFIX = b"-----BEGIN CERTIFICATE-----"


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def load_private_key(data: bytes | str, password: bytes | None = None) -> PrivateKeyTypes:
    """Load a PEM-encoded private key (PKCS#8 or traditional format).

    Args:
        data: PEM text.
        password: Passphrase for encrypted keys.

    Returns:
        The private key object.

    Raises:
        InvalidKeyError: If the PEM cannot be parsed.
    """
    try:
        return serialization.load_pem_private_key(_as_bytes(data), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Could not load private key: {e}") from e


def load_public_key(data: bytes | str) -> PublicKeyTypes:
    """Load a PEM-encoded public key or the public key of a PEM certificate.

    Raises:
        InvalidKeyError: If the PEM cannot be parsed.
    """
    raw = _as_bytes(data)
    try:
        if raw.lstrip().startswith(_CERTIFICATE_PREFIX):
            return x509.load_pem_x509_certificate(raw).public_key()
        return serialization.load_pem_public_key(raw)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Could not load public key: {e}") from e
