"""Key handling shared by the encode and decode commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from compact_jwt.jws.algorithms import Algorithm, HMACAlgorithm
from compact_jwt.jws.keys import load_private_key, load_public_key

ALGORITHM_OPTION_HELP = "JOSE algorithm name (HS256, RS256, PS256, ES256, EdDSA, ...)"


def signing_key(algorithm: Algorithm, secret: str | None, key_file: Path | None) -> Any:
    """Pick the signing key for an algorithm from the CLI options.

    Raises:
        click.UsageError: If the options do not provide a key for the algorithm.
        InvalidKeyError: If the key file is not a usable private key.
    """
    if isinstance(algorithm, HMACAlgorithm):
        return _hmac_secret(algorithm, secret, key_file)
    if key_file is None:
        raise click.UsageError(f"{algorithm.name} requires --key-file with a PEM private key")
    return load_private_key(key_file.read_bytes())


def verification_key(algorithm: Algorithm, secret: str | None, key_file: Path | None) -> Any:
    """Pick the verification key for an algorithm from the CLI options.

    Raises:
        click.UsageError: If the options do not provide a key for the algorithm.
        InvalidKeyError: If the key file is not a usable public key or certificate.
    """
    if isinstance(algorithm, HMACAlgorithm):
        return _hmac_secret(algorithm, secret, key_file)
    if key_file is None:
        raise click.UsageError(f"{algorithm.name} requires --key-file with a PEM public key")
    return load_public_key(key_file.read_bytes())


def _hmac_secret(algorithm: Algorithm, secret: str | None, key_file: Path | None) -> str | bytes:
    if secret is not None:
        return secret
    if key_file is not None:
        return key_file.read_bytes()
    raise click.UsageError(f"{algorithm.name} requires --secret or --key-file")
