"""
Gate that guards a form-handling endpoint behind reCAPTCHA verification.

Usage::

    @router.post("/contact")
    @validate_recaptcha(error_message="Please confirm that you are not a robot.")
    async def submit(request: Request, form: Annotated[ContactForm, Form()]):
        ...

The decorated endpoint must accept a ``request: Request`` parameter. Modules
declaring decorated endpoints must not use ``from __future__ import
annotations``: FastAPI resolves string annotations against the wrapper's
globals, not the endpoint's.

Rejections depend on who is asking:

- ``Accept: application/json``     → 400 with the validation errors
- browser + bound model + renderer → the renderer re-displays the form
- browser + bound model, no renderer → 303 back to the same path
- no bound model                   → 400 with the validation errors
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, Optional, Protocol

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from dependencies import get_recaptcha_verifier
from errors import CaptchaVerificationError
from shared.ip_utils import get_client_ip
from shared.logging import get_logger, hash_ip
from shared.model_state import ModelErrors, add_model_error, get_model_errors

log = get_logger(__name__)

RECAPTCHA_FORM_FIELD = "g-recaptcha-response"
DEFAULT_ERROR_MESSAGE = "Please verify that you are not a robot."

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class ViewRenderer(Protocol):
    """Re-renders the current view with the bound model and its errors."""

    def __call__(
        self, request: Request, model: Any, errors: ModelErrors
    ) -> Response: ...


def has_form_content(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in _FORM_CONTENT_TYPES


def accepts_json(request: Request) -> bool:
    return any(
        "application/json" in value.lower()
        for value in request.headers.getlist("accept")
    )


async def read_token(request: Request) -> str:
    form = await request.form()
    token = form.get(RECAPTCHA_FORM_FIELD)
    return token if isinstance(token, str) else ""


class RecaptchaGate:
    def __init__(
        self,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        renderer: Optional[ViewRenderer] = None,
    ) -> None:
        self.error_message = error_message
        self.renderer = renderer

    async def is_verified(self, request: Request) -> bool:
        """Resolve the pending check. Requests without form content pass."""
        if not has_form_content(request):
            return True
        token = await read_token(request)
        verifier = get_recaptcha_verifier(request)
        return await verifier.validate(token)

    def reject(self, request: Request, model: Any = None) -> Response:
        add_model_error(request, "", self.error_message)
        errors = get_model_errors(request)

        log.info(
            "recaptcha_gate_rejected",
            path=request.url.path,
            ip_hash=hash_ip(get_client_ip(request)),
        )

        if accepts_json(request) or model is None:
            return CaptchaVerificationError(
                self.error_message, details=errors
            ).to_response()

        if self.renderer is not None:
            return self.renderer(request, model, errors)

        log.warning(
            "recaptcha_gate_render_fallback",
            path=request.url.path,
            model_type=type(model).__name__,
        )
        return RedirectResponse(url=request.url.path, status_code=303)

    async def __call__(
        self,
        request: Request,
        call_next: Callable[[], Awaitable[Any]],
        model: Any = None,
    ) -> Any:
        if not await self.is_verified(request):
            return self.reject(request, model)
        return await call_next()


def _find_request(args: tuple, kwargs: dict) -> Request:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    raise RuntimeError(
        "validate_recaptcha requires the endpoint to take a `request: Request` parameter"
    )


def _find_model(kwargs: dict) -> Optional[BaseModel]:
    for value in kwargs.values():
        if isinstance(value, BaseModel):
            return value
    return None


def validate_recaptcha(
    error_message: str = DEFAULT_ERROR_MESSAGE,
    renderer: Optional[ViewRenderer] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Awaitable[Any]]]:
    """Decorate a FastAPI endpoint so it only runs for verified submissions."""
    gate = RecaptchaGate(error_message, renderer)

    def decorator(endpoint: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(endpoint)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = _find_request(args, kwargs)

            async def call_endpoint() -> Any:
                if inspect.iscoroutinefunction(endpoint):
                    return await endpoint(*args, **kwargs)
                return await run_in_threadpool(endpoint, *args, **kwargs)

            return await gate(request, call_endpoint, _find_model(kwargs))

        return wrapper

    return decorator
