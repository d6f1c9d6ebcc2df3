"""
FastAPI dependency providers.

Everything here reads objects that create_app() placed on app.state, so they
work both with Depends() and when called directly with a Request.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.templating import Jinja2Templates

from config import AppSettings
from infrastructure.captcha.protocol import CaptchaVerifier


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_recaptcha_verifier(request: Request) -> CaptchaVerifier:
    """Return the verifier built at start-up (real or test-mode)."""
    return request.app.state.recaptcha_verifier


def get_templates(request: Request) -> Jinja2Templates:
    """Return the Jinja2 environment with the recaptcha_widget helper installed."""
    return request.app.state.templates
