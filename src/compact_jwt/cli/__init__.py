"""Command-line interface for compact-jwt.

Provides commands for signing tokens, verifying and decoding them, and
inspecting their headers.
"""

from .main import cli, main

__all__ = ["cli", "main"]
