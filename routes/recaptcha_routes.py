"""
reCAPTCHA configuration endpoint.

GET /recaptcha/config returns the public site key for front-ends that draw the widget
themselves. The secret key never leaves the server.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from config import AppSettings
from dependencies import get_settings
from infrastructure.captcha.widget import script_url
from schemas.dto.responses.common import RecaptchaConfigResponse

router = APIRouter(prefix="/recaptcha", tags=["recaptcha"])


@router.get("/config", response_model=RecaptchaConfigResponse)
async def recaptcha_config(
    settings: AppSettings = Depends(get_settings),
) -> RecaptchaConfigResponse:
    return RecaptchaConfigResponse(
        site_key=settings.recaptcha.recaptcha_site_key,
        test_mode=settings.recaptcha.recaptcha_test_mode,
        script_url=script_url(),
    )
