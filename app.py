"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.templating import Jinja2Templates

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.protocol import CaptchaVerifier
from infrastructure.captcha.recaptcha import build_verifier
from infrastructure.captcha.widget import register_template_helpers
from infrastructure.http_client import HttpClient
from routes.contact_routes import TEMPLATES_DIR
from routes.contact_routes import router as contact_router
from routes.recaptcha_routes import router as recaptcha_router
from shared.logging import get_logger, setup_logging


def create_app(
    settings: Optional[AppSettings] = None,
    verifier: Optional[CaptchaVerifier] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    ``verifier`` overrides the one built from settings (used by tests and
    hosts that bring their own transport).
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, production=settings.is_production)
    log = get_logger(__name__)

    # Initialise Sentry early so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # The client is closed on shutdown and when start-up fails
        async with HttpClient(
            timeout=settings.recaptcha.recaptcha_timeout_seconds
        ) as http_client:
            app.state.http_client = http_client
            if verifier is None:
                app.state.recaptcha_verifier = build_verifier(
                    settings.recaptcha, http_client
                )
            else:
                app.state.recaptcha_verifier = verifier
            log.info(
                "recaptcha_verifier_ready",
                verifier=type(app.state.recaptcha_verifier).__name__,
                test_mode=settings.recaptcha.recaptcha_test_mode,
            )

            yield

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    templates_dir = settings.templates_dir or TEMPLATES_DIR
    templates = Jinja2Templates(directory=str(templates_dir))
    register_template_helpers(templates, settings.recaptcha.recaptcha_site_key)
    app.state.templates = templates
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(recaptcha_router)
    app.include_router(contact_router)

    return app
