"""
Common response DTOs.

ErrorResponse           — standard error shape from AppError.to_dict()
RecaptchaConfigResponse — GET /recaptcha/config
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by AppError.to_dict()."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class RecaptchaConfigResponse(BaseModel):
    """What a front-end needs to draw the widget itself."""

    model_config = ConfigDict(populate_by_name=True)

    site_key: str
    test_mode: bool
    script_url: str
