"""
Per-request validation-error collection.

Errors live on ``request.state`` so the recaptcha gate, the endpoint and the
template all see the same collection. Keys are form field names; ``""`` holds
form-level errors.
"""

from __future__ import annotations

from fastapi import Request

ModelErrors = dict[str, list[str]]

_STATE_ATTR = "model_errors"


def get_model_errors(request: Request) -> ModelErrors:
    errors = getattr(request.state, _STATE_ATTR, None)
    if errors is None:
        errors = {}
        setattr(request.state, _STATE_ATTR, errors)
    return errors


def add_model_error(request: Request, key: str, message: str) -> None:
    get_model_errors(request).setdefault(key, []).append(message)


def is_model_valid(request: Request) -> bool:
    return not any(get_model_errors(request).values())
