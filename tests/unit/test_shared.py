"""
Unit tests for the shared/ utility modules.

Covers:
- shared.logging      (redact_sensitive_fields, hash_ip, setup_logging)
- shared.ip_utils     (get_client_ip)
- shared.model_state  (add_model_error, get_model_errors, is_model_valid)
- shared.recaptcha_gate helpers (has_form_content, accepts_json)
"""

from __future__ import annotations

import hashlib
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from starlette.datastructures import Headers

import shared.logging as shared_logging
from config import LoggingSettings
from shared.ip_utils import get_client_ip
from shared.logging import hash_ip, redact_sensitive_fields, setup_logging
from shared.model_state import add_model_error, get_model_errors, is_model_valid
from shared.recaptcha_gate import accepts_json, has_form_content


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_request(headers: dict | list, client_host: str = "10.0.0.1") -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    if isinstance(headers, list):
        req.headers = Headers(raw=[(k.lower().encode(), v.encode()) for k, v in headers])
    else:
        req.headers = Headers(headers)
    req.client = MagicMock()
    req.client.host = client_host
    req.state = SimpleNamespace()
    return req


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestRedactSensitiveFields:
    def test_redacts_token_and_secret(self):
        event = redact_sensitive_fields(
            None,
            "info",
            {"event": "x", "token": "abc", "secret_key": "s", "access_token": "t"},
        )
        assert event["token"] == "***REDACTED***"
        assert event["secret_key"] == "***REDACTED***"
        assert event["access_token"] == "***REDACTED***"

    def test_redacts_recaptcha_form_field(self):
        event = redact_sensitive_fields(
            None, "info", {"event": "x", "g-recaptcha-response": "tok"}
        )
        assert event["g-recaptcha-response"] == "***REDACTED***"

    def test_keeps_diagnostics(self):
        event = redact_sensitive_fields(
            None,
            "warning",
            {"event": "recaptcha_verification_failed", "error_codes": ["bad"]},
        )
        assert event == {"event": "recaptcha_verification_failed", "error_codes": ["bad"]}


class TestHashIp:
    def test_none_passthrough(self):
        assert hash_ip(None) is None

    def test_plain_in_development(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "_is_production", False)
        assert hash_ip("1.2.3.4") == "1.2.3.4"

    def test_hashed_in_production(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "_is_production", True)
        expected = hashlib.sha256(b"1.2.3.4").hexdigest()[:16]
        assert hash_ip("1.2.3.4") == expected


class TestSetupLogging:
    @pytest.mark.parametrize("log_format", ["console", "json"])
    def test_configures_without_error(self, monkeypatch, log_format):
        monkeypatch.setattr(shared_logging, "_is_production", False)
        setup_logging(LoggingSettings(log_level="DEBUG", log_format=log_format))
        shared_logging.get_logger("test").info("hello", token="hidden")

    def test_production_flag_enables_ip_hashing(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "_is_production", False)
        setup_logging(LoggingSettings(), production=True)
        assert hash_ip("1.2.3.4") != "1.2.3.4"


# ---------------------------------------------------------------------------
# shared.ip_utils
# ---------------------------------------------------------------------------


class TestGetClientIp:
    def test_cloudflare_header_wins(self):
        req = _make_request({"CF-Connecting-IP": "1.1.1.1", "X-Real-IP": "2.2.2.2"})
        assert get_client_ip(req) == "1.1.1.1"

    def test_first_forwarded_for(self):
        req = _make_request({"X-Forwarded-For": "3.3.3.3, 10.0.0.2"})
        assert get_client_ip(req) == "3.3.3.3"

    def test_falls_back_to_client_host(self):
        assert get_client_ip(_make_request({})) == "10.0.0.1"

    def test_empty_without_client(self):
        req = _make_request({})
        req.client = None
        assert get_client_ip(req) == ""


# ---------------------------------------------------------------------------
# shared.model_state
# ---------------------------------------------------------------------------


class TestModelState:
    def test_starts_valid_and_empty(self):
        req = _make_request({})
        assert is_model_valid(req)
        assert get_model_errors(req) == {}

    def test_errors_accumulate_per_key(self):
        req = _make_request({})
        add_model_error(req, "", "robot?")
        add_model_error(req, "email", "required")
        add_model_error(req, "email", "invalid")
        assert get_model_errors(req) == {"": ["robot?"], "email": ["required", "invalid"]}
        assert not is_model_valid(req)


# ---------------------------------------------------------------------------
# shared.recaptcha_gate helpers
# ---------------------------------------------------------------------------


class TestHasFormContent:
    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("application/x-www-form-urlencoded", True),
            ("application/x-www-form-urlencoded; charset=utf-8", True),
            ("multipart/form-data; boundary=abc", True),
            ("Multipart/Form-Data; boundary=abc", True),
            ("application/json", False),
            ("text/plain", False),
        ],
    )
    def test_content_types(self, content_type, expected):
        assert has_form_content(_make_request({"content-type": content_type})) is expected

    def test_missing_content_type(self):
        assert has_form_content(_make_request({})) is False


class TestAcceptsJson:
    @pytest.mark.parametrize(
        "accept, expected",
        [
            ("application/json", True),
            ("text/html, application/json;q=0.9", True),
            ("text/html,application/xhtml+xml", False),
            ("*/*", False),
        ],
    )
    def test_single_header(self, accept, expected):
        assert accepts_json(_make_request({"accept": accept})) is expected

    def test_repeated_headers(self):
        req = _make_request([("Accept", "text/html"), ("Accept", "application/json")])
        assert accepts_json(req) is True

    def test_no_accept_header(self):
        assert accepts_json(_make_request({})) is False
