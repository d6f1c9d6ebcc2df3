"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The reCAPTCHA test-mode flags are read once here and baked into the verifier
built at start-up; they are not toggled per request.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Public key, only used by the widget helper
    recaptcha_site_key: str = ""
    # Private key, only used by the verifier
    recaptcha_secret_key: str = ""

    recaptcha_test_mode: bool = False
    recaptcha_test_mode_result: bool = True

    recaptcha_verify_url: str = RECAPTCHA_VERIFY_URL
    recaptcha_timeout_seconds: float = 5.0


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "recaptcha-gate"

    cors_origins: list[str] = ["*"]

    # Directory holding the Jinja2 templates for the sample form pages;
    # unset means the templates bundled with the routes package
    templates_dir: Optional[str] = None

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    recaptcha: Optional[RecaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.recaptcha is None:
            self.recaptcha = RecaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
