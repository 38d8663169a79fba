"""Inspect command for compact-jwt CLI."""

from __future__ import annotations

import json
import sys

import click

from compact_jwt.exceptions import JWTError
from compact_jwt.jws.codec import get_unverified_header


@click.command("inspect")
@click.argument("token")
def inspect_cmd(token: str) -> None:
    """Print the header of TOKEN without verifying it.

    Useful for finding the "alg" and "kid" before choosing a key.
    """
    try:
        header = get_unverified_header(token)
    except JWTError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(header.to_wire(), indent=2, ensure_ascii=False))
