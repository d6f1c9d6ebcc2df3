"""
Request DTOs for the sample contact form.

ContactForm — POST /contact (form-encoded)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ContactForm(BaseModel):
    """Form body for POST /contact.

    Fields default to empty so a partially filled form still binds and can be
    re-displayed with errors. The ``g-recaptcha-response`` field is read by
    the gate and ignored here.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = ""
    email: str = ""
    message: str = ""

    def missing_fields(self) -> list[str]:
        return [field for field in ("name", "email", "message") if not getattr(self, field)]
