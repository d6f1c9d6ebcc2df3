"""
Template helper that emits the reCAPTCHA v2 widget markup.

The widget itself is drawn by Google's script; all we produce is the
container ``<div>`` with its ``data-*`` options and the script tag.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape
from pydantic import BaseModel, ConfigDict

RECAPTCHA_SCRIPT_URL = "https://www.google.com/recaptcha/api.js"


class WidgetOptions(BaseModel):
    """Presentation options for a single widget."""

    model_config = ConfigDict(extra="forbid")

    theme: str = "light"  # light | dark
    size: str = "normal"  # normal | compact
    tabindex: str = "0"
    callback: str = ""
    expired_callback: str = ""
    error_callback: str = ""
    invisible: bool = False
    language: str = ""
    css_class: str = ""


def _widget_attributes(site_key: str, options: WidgetOptions) -> list[tuple[str, str]]:
    css_class = "g-recaptcha"
    if options.css_class:
        css_class += f" {options.css_class}"

    attrs = [("class", css_class), ("data-sitekey", site_key)]
    if options.theme:
        attrs.append(("data-theme", options.theme))
    if options.invisible:
        attrs.append(("data-size", "invisible"))
    elif options.size:
        attrs.append(("data-size", options.size))
    if options.tabindex:
        attrs.append(("data-tabindex", options.tabindex))
    if options.callback:
        attrs.append(("data-callback", options.callback))
    if options.expired_callback:
        attrs.append(("data-expired-callback", options.expired_callback))
    if options.error_callback:
        attrs.append(("data-error-callback", options.error_callback))
    return attrs


def script_url(language: str = "") -> str:
    if not language:
        return RECAPTCHA_SCRIPT_URL
    return f"{RECAPTCHA_SCRIPT_URL}?{urlencode({'hl': language})}"


def render_widget(
    site_key: str, options: Optional[WidgetOptions] = None, **overrides: Any
) -> Markup:
    """Render the widget container followed by the api.js script tag.

    Args:
        site_key: Public reCAPTCHA site key.
        options: Base options; keyword ``overrides`` are applied on top.

    Returns:
        Markup safe to drop into a Jinja2 template unescaped.
    """
    if options is None:
        options = WidgetOptions(**overrides)
    elif overrides:
        options = WidgetOptions(**{**options.model_dump(), **overrides})

    rendered = " ".join(
        f'{name}="{escape(value)}"' for name, value in _widget_attributes(site_key, options)
    )
    return Markup(
        f"<div {rendered}></div>"
        f'<script src="{escape(script_url(options.language))}" async defer></script>'
    )


def register_template_helpers(templates: Jinja2Templates, site_key: str) -> None:
    """Expose ``recaptcha_widget(**options)`` to every template."""
    templates.env.globals["recaptcha_widget"] = partial(render_widget, site_key)
