"""Main CLI entry point for compact-jwt.

Defines the CLI group and registers all subcommands.

Commands:
    encode   - Sign a JSON payload and print the compact token
    decode   - Verify a token, validate its claims, print header and payload
    inspect  - Print a token's header without verifying it

Usage:
    compact-jwt -h, --help      Show help message
    compact-jwt -v, --version   Show version
    compact-jwt --debug CMD     Log codec events as JSON lines on stderr
    compact-jwt encode          Sign claims
    compact-jwt decode          Verify and decode a token
    compact-jwt inspect         Show the unverified header

Subcommand help:
    compact-jwt COMMAND -h      Show help for a specific command
"""

import logging
import sys

import click

from compact_jwt import __version__
from compact_jwt.telemetry.system_logger import configure_system_logger

from .commands.decode import decode_cmd
from .commands.encode import encode_cmd
from .commands.inspect import inspect_cmd


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Examples:
  compact-jwt encode --secret s3cret '{"sub": "user-42"}'
  compact-jwt encode --alg RS256 --key-file private.pem -H kid=key-1 '{"sub": "user-42"}'
  compact-jwt decode --alg HS256 --secret s3cret eyJ...
  compact-jwt decode --alg ES256 --key-file public.pem --config validation.json eyJ...
  compact-jwt inspect eyJ...

Validation config (--config):
  {"leeway": 30, "issuer": "auth.example.com", "audience": "api", "verify_iat": false}
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--debug", is_flag=True, help="Log codec events to stderr")
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool) -> None:
    """compact-jwt: sign, verify and inspect compact JWS tokens."""
    if version:
        click.echo(f"compact-jwt {__version__}")
        sys.exit(0)
    if debug:
        configure_system_logger(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(encode_cmd)
cli.add_command(decode_cmd)
cli.add_command(inspect_cmd)


def main() -> None:
    """CLI entry point."""
    cli()
