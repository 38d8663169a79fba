"""Decoded token value returned by decode()."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from compact_jwt.jws.header import Header

__all__ = ["Token"]

P = TypeVar("P")


@dataclass(frozen=True)
class Token(Generic[P]):
    """A decoded JWS.

    Attributes:
        header: Decoded JOSE header, exactly as received.
        payload: Payload parsed into the requested payload type.
        verified: True when a signature was checked; False for NoVerify.
    """

    header: Header
    payload: P
    verified: bool = True
