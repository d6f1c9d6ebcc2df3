"""
Value objects exchanged with the reCAPTCHA verification endpoint.

VerificationRequest  — the secret + token pair sent upstream
RemoteResponse       — the JSON body Google sends back
VerificationOutcome  — what the verifier hands to its callers
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VerificationRequest(BaseModel):
    """Secret + client token, built fresh for every verification call."""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(repr=False)
    token: str

    def to_form(self) -> dict[str, str]:
        """Wire fields for the siteverify POST body."""
        return {"secret": self.secret, "response": self.token}


class RemoteResponse(BaseModel):
    """Body returned by ``/recaptcha/api/siteverify``.

    Keys are matched case-insensitively; unknown keys are ignored and a
    missing ``success`` counts as a failure.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: Optional[list[str]] = Field(default_factory=list, alias="error-codes")

    @field_validator("error_codes", mode="after")
    @classmethod
    def _null_codes_as_empty(cls, value: Optional[list[str]]) -> list[str]:
        return value or []

    @classmethod
    def from_json(cls, data: Any) -> "RemoteResponse":
        """Validate a decoded JSON body.

        Raises:
            TypeError: the body is not a JSON object.
            pydantic.ValidationError: a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return cls.model_validate({str(k).lower(): v for k, v in data.items()})


class VerificationOutcome(NamedTuple):
    success: bool
    error_detail: str = ""
