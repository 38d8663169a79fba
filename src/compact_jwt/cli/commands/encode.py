"""Encode command for compact-jwt CLI.

Signs a JSON payload and prints the compact token.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from compact_jwt.cli.keys import ALGORITHM_OPTION_HELP, signing_key
from compact_jwt.exceptions import JWTError
from compact_jwt.jws.algorithms import DEFAULT_REGISTRY
from compact_jwt.jws.codec import encode
from compact_jwt.jws.header import Header


def _parse_header_params(params: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated --header KEY=VALUE options.

    Raises:
        click.BadParameter: If an entry has no "=" or an empty key.
    """
    parsed: dict[str, str] = {}
    for param in params:
        name, sep, value = param.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected KEY=VALUE, got {param!r}", param_hint="--header")
        parsed[name] = value
    return parsed


@click.command("encode")
@click.option("--alg", "-a", "alg_name", default="HS256", show_default=True, help=ALGORITHM_OPTION_HELP)
@click.option("--secret", "-s", help="HMAC secret (HS256/384/512)")
@click.option(
    "--key-file",
    "-k",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="PEM private key, or a file holding the HMAC secret",
)
@click.option(
    "--header",
    "-H",
    "header_params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Additional header parameter (repeatable, e.g. -H kid=key-1)",
)
@click.argument("claims_json")
def encode_cmd(
    alg_name: str,
    secret: str | None,
    key_file: Path | None,
    header_params: tuple[str, ...],
    claims_json: str,
) -> None:
    """Sign CLAIMS_JSON and print the compact token.

    CLAIMS_JSON is any JSON value, usually an object of claims:

        compact-jwt encode --secret s3cret '{"sub": "user-42", "exp": 1900000000}'

    Exit codes:
        0: Token printed
        1: Invalid claims, key or algorithm
    """
    try:
        claims = json.loads(claims_json)
    except json.JSONDecodeError as e:
        click.echo(f"✗ Invalid claims JSON: {e}", err=True)
        sys.exit(1)

    header = Header.model_validate(_parse_header_params(header_params))

    try:
        algorithm = DEFAULT_REGISTRY.get(alg_name)
        key = signing_key(algorithm, secret, key_file)
        token = encode(header, claims, algorithm, key)
    except JWTError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(token)
