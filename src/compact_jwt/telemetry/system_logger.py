"""System logger for compact-jwt.

Library code logs structured events as dicts with an "event" key:

    _system_logger.debug({"event": "token_rejected", "error_kind": "expired"})

The logger carries a NullHandler so nothing is emitted unless the host
application configures logging (or calls configure_system_logger, as the
CLI does for --debug). Tokens, keys and signatures are never logged.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO

__all__ = [
    "SYSTEM_LOGGER_NAME",
    "JsonEventFormatter",
    "configure_system_logger",
    "get_system_logger",
]

SYSTEM_LOGGER_NAME = "compact-jwt.system"

_logger = logging.getLogger(SYSTEM_LOGGER_NAME)
_logger.addHandler(logging.NullHandler())


class JsonEventFormatter(logging.Formatter):
    """Format dict log messages as single-line JSON.

    Non-dict messages are wrapped as {"message": "..."}.
    """

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            data = dict(record.msg)
        else:
            data = {"message": record.getMessage()}

        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            **data,
        }
        return json.dumps(entry, default=str)


def get_system_logger() -> logging.Logger:
    """Get the compact-jwt system logger."""
    return _logger


def configure_system_logger(level: int = logging.DEBUG, stream: IO[str] | None = None) -> logging.Logger:
    """Attach a JSON-lines stream handler to the system logger.

    Calling this more than once replaces the previously attached handler.

    Args:
        level: Minimum level to emit.
        stream: Target stream (default: stderr).

    Returns:
        The configured system logger.
    """
    for handler in list(_logger.handlers):
        if isinstance(handler, logging.StreamHandler) and isinstance(handler.formatter, JsonEventFormatter):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonEventFormatter())
    _logger.addHandler(handler)
    _logger.setLevel(level)
    return _logger
