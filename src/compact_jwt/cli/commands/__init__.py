"""CLI subcommands for compact-jwt."""
