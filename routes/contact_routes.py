"""
Sample contact form protected by reCAPTCHA.

GET  /contact — empty form (or the success banner after a redirect)
POST /contact — gated submission; Post/Redirect/Get on success

No ``from __future__ import annotations`` here: the POST endpoint is wrapped
by validate_recaptcha and FastAPI must see real annotation objects.
"""

from pathlib import Path
from typing import Annotated, Any

from fastapi import APIRouter, Form, Request, Response
from fastapi.responses import RedirectResponse

from dependencies import get_templates
from schemas.dto.requests.contact import ContactForm
from schemas.dto.responses.common import ErrorResponse
from shared.logging import get_logger
from shared.model_state import (
    ModelErrors,
    add_model_error,
    get_model_errors,
    is_model_valid,
)
from shared.recaptcha_gate import validate_recaptcha

router = APIRouter(tags=["contact"])
log = get_logger(__name__)

# Installed as package data alongside this module
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def render_contact_form(
    request: Request,
    model: Any,
    errors: ModelErrors,
    status_code: int = 400,
) -> Response:
    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "contact.html",
        {"form": model, "errors": errors, "success": False},
        status_code=status_code,
    )


@router.get("/contact")
async def contact_page(request: Request, sent: bool = False) -> Response:
    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "contact.html",
        {"form": ContactForm(), "errors": {}, "success": sent},
    )


@router.post("/contact", responses={400: {"model": ErrorResponse}})
@validate_recaptcha(
    error_message="Please confirm that you are not a robot.",
    renderer=render_contact_form,
)
async def submit_contact(
    request: Request, form: Annotated[ContactForm, Form()]
) -> Response:
    for field in form.missing_fields():
        add_model_error(request, field, f"The {field} field is required.")

    if not is_model_valid(request):
        return render_contact_form(request, form, get_model_errors(request))

    log.info(
        "contact_message_received",
        email_domain=form.email.split("@")[1] if "@" in form.email else "unknown",
        message_length=len(form.message),
    )
    return RedirectResponse(url="/contact?sent=true", status_code=303)
