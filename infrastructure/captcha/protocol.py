"""CaptchaVerifier protocol: the gate and routes depend on this, not the concrete implementation."""

from typing import Optional, Protocol

from schemas.models.recaptcha import VerificationOutcome


class CaptchaVerifier(Protocol):
    async def validate(self, token: Optional[str]) -> bool: ...

    async def validate_with_details(
        self, token: Optional[str]
    ) -> VerificationOutcome: ...
