"""Decode command for compact-jwt CLI.

Verifies a token, validates its claims and prints header and payload.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from compact_jwt.cli.keys import ALGORITHM_OPTION_HELP, verification_key
from compact_jwt.config import ValidationConfig
from compact_jwt.exceptions import JWTError
from compact_jwt.jws.algorithms import DEFAULT_REGISTRY
from compact_jwt.jws.codec import decode
from compact_jwt.jws.verification import NoVerify, VerificationStrategy, VerifyWithKey
from compact_jwt.validation import validate


@click.command("decode")
@click.argument("token")
@click.option("--alg", "-a", "alg_name", help=ALGORITHM_OPTION_HELP)
@click.option("--secret", "-s", help="HMAC secret (HS256/384/512)")
@click.option(
    "--key-file",
    "-k",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="PEM public key or certificate, or a file holding the HMAC secret",
)
@click.option("--no-verify", is_flag=True, help="Skip signature verification (claims are still validated)")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Validation config JSON (default: check iat, nbf and exp)",
)
def decode_cmd(
    token: str,
    alg_name: str | None,
    secret: str | None,
    key_file: Path | None,
    no_verify: bool,
    config_path: Path | None,
) -> None:
    """Verify TOKEN, validate its claims and print header and payload.

    The token must declare the algorithm given with --alg:

        compact-jwt decode --alg HS256 --secret s3cret eyJ...

    Exit codes:
        0: Token valid
        1: Token, key or claims invalid
    """
    if not no_verify and alg_name is None:
        raise click.UsageError("--alg is required unless --no-verify is given")

    try:
        config = ValidationConfig.load_from_file(config_path) if config_path else ValidationConfig()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    try:
        strategy: VerificationStrategy
        if no_verify:
            strategy = NoVerify()
        else:
            algorithm = DEFAULT_REGISTRY.get(alg_name)
            strategy = VerifyWithKey(algorithm, verification_key(algorithm, secret, key_file))

        decoded = decode(token, strategy)
        validate(decoded.payload, *config.build_validators())
    except JWTError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if not decoded.verified:
        click.echo("⚠ Signature not verified", err=True)

    output = {"header": decoded.header.to_wire(), "payload": decoded.payload}
    click.echo(json.dumps(output, indent=2, ensure_ascii=False))
