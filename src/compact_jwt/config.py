"""Claim validation configuration for compact-jwt.

ValidationConfig describes which claim checks to run after decode().
The time checks (iat, nbf, exp) are on by default; equality checks run
only for the expectations that are set.

Example usage:
    # Build validators from code
    config = ValidationConfig(issuer="auth.example.com", leeway=30)
    validate(token.payload, *config.build_validators())

    # Load from a JSON file
    config = ValidationConfig.load_from_file(Path("validation.json"))

Example file:
    {"leeway": 30, "issuer": "auth.example.com", "verify_iat": false}
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from compact_jwt.constants import DEFAULT_LEEWAY_SECONDS, MAX_LEEWAY_SECONDS
from compact_jwt.utils.clock import now_seconds
from compact_jwt.validation import (
    ExpectAud,
    ExpectIss,
    ExpectJti,
    ExpectSub,
    ExpiredTime,
    IssuedAtTime,
    NotBeforeTime,
    Validation,
)

__all__ = ["ValidationConfig"]


class ValidationConfig(BaseModel):
    """Claim validation settings.

    Attributes:
        verify_iat: Reject tokens issued in the future.
        verify_nbf: Reject tokens used before "nbf".
        verify_exp: Reject expired tokens.
        leeway: Clock skew tolerance in seconds (0-300), applied to all time checks.
        issuer: Required "iss" value.
        subject: Required "sub" value.
        audience: Required "aud" value.
        jwt_id: Required "jti" value.
    """

    verify_iat: bool = True
    verify_nbf: bool = True
    verify_exp: bool = True
    leeway: int = Field(
        default=DEFAULT_LEEWAY_SECONDS,
        ge=0,
        le=MAX_LEEWAY_SECONDS,
    )
    issuer: str | None = None
    subject: str | None = None
    audience: str | None = None
    jwt_id: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def build_validators(self, clock: Callable[[], int] = now_seconds) -> list[Validation]:
        """Build the validator list described by this config.

        Args:
            clock: Time source shared by the time validators.

        Returns:
            Validators in a fixed order: iat, nbf, exp, iss, sub, aud, jti.
        """
        validators: list[Validation] = []
        if self.verify_iat:
            validators.append(IssuedAtTime(leeway=self.leeway, clock=clock))
        if self.verify_nbf:
            validators.append(NotBeforeTime(leeway=self.leeway, clock=clock))
        if self.verify_exp:
            validators.append(ExpiredTime(leeway=self.leeway, clock=clock))
        if self.issuer is not None:
            validators.append(ExpectIss(self.issuer))
        if self.subject is not None:
            validators.append(ExpectSub(self.subject))
        if self.audience is not None:
            validators.append(ExpectAud(self.audience))
        if self.jwt_id is not None:
            validators.append(ExpectJti(self.jwt_id))
        return validators

    @classmethod
    def load_from_file(cls, config_path: Path) -> ValidationConfig:
        """Load configuration from a JSON file.

        Args:
            config_path: Path to the config file.

        Returns:
            ValidationConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the config file is invalid or has unknown fields.
        """
        config_path = Path(config_path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Validation config not found at {config_path}")

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in validation config {config_path}: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid validation config {config_path}: {e}") from e
