"""Registered JWT claims (RFC 7519 Section 4.1).

Claims is one ready-made payload type. The codec accepts any payload
pydantic can serialize, and the validators only need the fields they
check, so user models and plain dicts participate equally.

Example:
    claims = Claims(iss="auth.example.com", sub="user-42").issued_now().expires_in(3600)
    token = encode(Header(), claims, HS256, secret)
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from compact_jwt.utils.clock import now_seconds, to_numeric_date
from compact_jwt.validation import Validation, validate

__all__ = ["Claims"]


class Claims(BaseModel):
    """Immutable set of registered claims plus any custom claims.

    Custom claims are accepted as extra fields and preserved round-trip
    (see Claims.extra). Registered claims that are None are omitted on
    the wire; custom claims are written as given, null included.

    Attributes:
        iss: Issuer.
        sub: Subject.
        aud: Audience (a single string).
        exp: Expiration time, seconds since epoch.
        nbf: Not before, seconds since epoch.
        iat: Issued at, seconds since epoch.
        jti: JWT ID.
    """

    iss: str | None = None
    sub: str | None = None
    aud: str | None = None
    exp: int | None = Field(default=None, ge=0, strict=True)
    nbf: int | None = Field(default=None, ge=0, strict=True)
    iat: int | None = Field(default=None, ge=0, strict=True)
    jti: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def extra(self) -> dict[str, Any]:
        """Custom (non-registered) claims."""
        return dict(self.model_extra or {})

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict: registered claims that are set, then custom claims as given."""
        extra = self.model_extra or {}
        return {
            name: value
            for name, value in self.model_dump(mode="json").items()
            if value is not None or name in extra
        }

    def issued_now(self) -> Claims:
        """Return a copy with "iat" set to the current time."""
        return self.model_copy(update={"iat": now_seconds()})

    def expires_in(self, duration: int | timedelta) -> Claims:
        """Return a copy expiring duration (seconds or timedelta) from now."""
        seconds = int(duration.total_seconds()) if isinstance(duration, timedelta) else int(duration)
        return self.model_copy(update={"exp": now_seconds() + seconds})

    def expires_at(self, moment: datetime) -> Claims:
        """Return a copy with "exp" set to moment."""
        return self.model_copy(update={"exp": to_numeric_date(moment)})

    def not_before(self, moment: datetime) -> Claims:
        """Return a copy with "nbf" set to moment."""
        return self.model_copy(update={"nbf": to_numeric_date(moment)})

    def validate_with(self, *validators: Validation) -> None:
        """Run validators against these claims, raising the first failure.

        Raises:
            ClaimValidationError: From the first failing validator.
        """
        validate(self, *validators)
