"""JOSE header model (RFC 7515 Section 4).

Header structure on the wire:
    typ  Token type (default "JWT")
    alg  Algorithm, always written by encode() from the algorithm object
    cty  Content type
    jku  JWK Set URL
    kid  Key ID
    x5u  X.509 URL
    x5t  X.509 certificate SHA-1 thumbprint
    ...  Any additional parameters, preserved round-trip

Registered parameters that are None are omitted; extra parameters are
kept as given, including null values. Registered parameters are serialized
first, in the order above, followed by extra parameters in insertion
order.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from compact_jwt.constants import DEFAULT_TOKEN_TYPE, REGISTERED_HEADER_PARAMETERS

__all__ = ["Header"]


class Header(BaseModel):
    """Immutable JOSE header.

    Callers build headers without "alg"; encode() sets it from the
    algorithm used to sign. Any "alg" passed here is overwritten.

    Attributes:
        typ: Token type (default "JWT").
        alg: Algorithm name, set by the codec.
        cty: Content type.
        jku: JWK Set URL.
        kid: Key ID, typically read by key resolvers.
        x5u: X.509 URL.
        x5t: X.509 certificate thumbprint.
    """

    typ: str | None = DEFAULT_TOKEN_TYPE
    alg: str | None = None
    cty: str | None = None
    jku: str | None = None
    kid: str | None = None
    x5u: str | None = None
    x5t: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def extra(self) -> dict[str, Any]:
        """Additional (non-modeled) header parameters."""
        return dict(self.model_extra or {})

    def get(self, name: str, default: Any = None) -> Any:
        """Read any header parameter, registered or extra."""
        if name in REGISTERED_HEADER_PARAMETERS:
            value = getattr(self, name)
            return default if value is None else value
        return self.extra.get(name, default)

    def with_algorithm(self, name: str) -> Header:
        """Return a copy of this header with "alg" set to name."""
        return self.model_copy(update={"alg": name})

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict in wire order, unset registered parameters omitted."""
        extra = self.model_extra or {}
        return {
            name: value
            for name, value in self.model_dump(mode="json").items()
            if value is not None or name in extra
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Header:
        """Build a header from decoded JSON without injecting defaults.

        A header without "typ" stays without it, so the decoded header
        describes exactly what was received.

        Raises:
            pydantic.ValidationError: If a registered parameter has the wrong type.
        """
        return cls.model_validate({"typ": None, **data})
