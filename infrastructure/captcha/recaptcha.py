"""reCAPTCHA v2 implementation of CaptchaVerifier.

Every failure mode (missing token, transport error, non-2xx status, remote
rejection, malformed body) collapses to a failed VerificationOutcome; nothing
raises past validate() / validate_with_details().
"""

from __future__ import annotations

from typing import Optional

import httpx
from structlog.stdlib import BoundLogger

from config import RECAPTCHA_VERIFY_URL, RecaptchaSettings
from infrastructure.captcha.protocol import CaptchaVerifier
from infrastructure.http_client import HttpTransport
from schemas.models.recaptcha import (
    RemoteResponse,
    VerificationOutcome,
    VerificationRequest,
)
from shared.logging import get_logger

MISSING_TOKEN_MESSAGE = "reCAPTCHA response was not provided"
TEST_MODE_FAILURE_MESSAGE = "Test mode validation failed"
MALFORMED_RESPONSE_MESSAGE = "Invalid response format received from reCAPTCHA service"


class RecaptchaVerifier:
    def __init__(
        self,
        secret: str,
        http_client: HttpTransport,
        *,
        verify_url: str = RECAPTCHA_VERIFY_URL,
        logger: Optional[BoundLogger] = None,
    ) -> None:
        if not secret:
            raise ValueError("reCAPTCHA secret key is not configured")
        self._secret = secret
        self._http = http_client
        self._verify_url = verify_url
        self._log = logger or get_logger(__name__)

    async def validate(self, token: Optional[str]) -> bool:
        outcome = await self.validate_with_details(token)
        return outcome.success

    async def validate_with_details(
        self, token: Optional[str]
    ) -> VerificationOutcome:
        if not token:
            self._log.warning("recaptcha_token_missing")
            return VerificationOutcome(False, MISSING_TOKEN_MESSAGE)

        request = VerificationRequest(secret=self._secret, token=token)
        try:
            response = await self._http.post(self._verify_url, data=request.to_form())
        except httpx.HTTPError as e:
            self._log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            return VerificationOutcome(
                False, f"Error connecting to reCAPTCHA service: {e}"
            )
        except Exception as e:
            self._log.error(
                "recaptcha_unexpected_error", error=str(e), error_type=type(e).__name__
            )
            return VerificationOutcome(False, f"Error during reCAPTCHA validation: {e}")

        try:
            if not 200 <= response.status_code < 300:
                self._log.error(
                    "recaptcha_api_error",
                    status_code=response.status_code,
                    response_text=response.text[:200],
                )
                return VerificationOutcome(
                    False, f"Error connecting to Google server: {response.status_code}"
                )

            try:
                result = RemoteResponse.from_json(response.json())
            except (ValueError, TypeError) as e:
                # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
                self._log.error(
                    "recaptcha_response_malformed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return VerificationOutcome(False, MALFORMED_RESPONSE_MESSAGE)

            if not result.success:
                detail = ", ".join(result.error_codes) or "unknown reason"
                self._log.warning(
                    "recaptcha_verification_failed", error_codes=result.error_codes
                )
                return VerificationOutcome(
                    False, f"reCAPTCHA validation failed: {detail}"
                )

            self._log.info(
                "recaptcha_verified",
                hostname=result.hostname,
                challenge_ts=result.challenge_ts,
            )
            return VerificationOutcome(True, "")
        except Exception as e:
            # e.g. RecursionError from a deeply nested body
            self._log.error(
                "recaptcha_unexpected_error", error=str(e), error_type=type(e).__name__
            )
            return VerificationOutcome(False, f"Error during reCAPTCHA validation: {e}")


class TestingRecaptchaVerifier:
    """Verifier with a fixed answer and no network access.

    Selected at start-up when RECAPTCHA_TEST_MODE is set, so non-production
    environments never reach Google.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, result: bool = True, *, logger: Optional[BoundLogger] = None) -> None:
        self._result = result
        self._log = logger or get_logger(__name__)

    @property
    def result(self) -> bool:
        return self._result

    async def validate(self, token: Optional[str]) -> bool:
        self._log.info("recaptcha_test_mode", result=self._result)
        return self._result

    async def validate_with_details(
        self, token: Optional[str]
    ) -> VerificationOutcome:
        self._log.info("recaptcha_test_mode", result=self._result)
        if self._result:
            return VerificationOutcome(True, "")
        return VerificationOutcome(False, TEST_MODE_FAILURE_MESSAGE)


def build_verifier(
    settings: RecaptchaSettings, http_client: HttpTransport
) -> CaptchaVerifier:
    """Pick the verifier variant the settings ask for."""
    if settings.recaptcha_test_mode:
        return TestingRecaptchaVerifier(settings.recaptcha_test_mode_result)
    return RecaptchaVerifier(
        settings.recaptcha_secret_key,
        http_client,
        verify_url=settings.recaptcha_verify_url,
    )
