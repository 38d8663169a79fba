"""Telemetry for compact-jwt (structured system logging)."""

from compact_jwt.telemetry.system_logger import (
    SYSTEM_LOGGER_NAME,
    JsonEventFormatter,
    configure_system_logger,
    get_system_logger,
)

__all__ = [
    "SYSTEM_LOGGER_NAME",
    "JsonEventFormatter",
    "configure_system_logger",
    "get_system_logger",
]
