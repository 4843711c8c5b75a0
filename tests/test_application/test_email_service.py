"""
Tests for email rendering and SendGrid delivery
"""
from unittest.mock import MagicMock, patch

import requests

from ecofinance.application.email_service import (
    LoggingEmailSender,
    SendGridEmailSender,
    build_reset_link,
    create_email_sender,
    render_password_reset_email,
    render_welcome_email,
)
from ecofinance.config import Settings

HOSTILE_NAME = '<a href="https://evil.example">Click</a>'


class TestRendering:
    def test_welcome_escapes_first_name(self):
        html = render_welcome_email(HOSTILE_NAME, "http://localhost:3000/")

        assert "<a href=\"https://evil.example\">" not in html
        assert "&lt;a href=&#34;https://evil.example&#34;&gt;Click&lt;/a&gt;" in html
        assert 'href="http://localhost:3000/dashboard"' in html

    def test_welcome_plain_name(self):
        assert "Добро пожаловать, Анна!" in render_welcome_email("Анна", "http://localhost:3000")

    def test_password_reset_contains_link_and_ttl(self):
        link = build_reset_link("http://localhost:3000/", "abc123")
        html = render_password_reset_email(link, 60)

        assert link == "http://localhost:3000/reset-password?token=abc123"
        assert f'<a href="{link}">{link}</a>' in html
        assert "60 минут" in html

    def test_password_reset_escapes_link(self):
        html = render_password_reset_email('http://x/"><script>alert(1)</script>', 60)
        assert "<script>" not in html


class TestSendGridEmailSender:
    def _sender(self):
        return SendGridEmailSender("SG.key", "noreply@ecofinance.app", reset_ttl_minutes=30)

    def test_posts_rendered_html(self):
        response = MagicMock(status_code=202)
        with patch("ecofinance.application.email_service.requests.post", return_value=response) as post:
            assert self._sender().send_welcome_email("anna@example.com", HOSTILE_NAME, "http://localhost:3000")

        body = post.call_args.kwargs["json"]
        assert post.call_args.kwargs["headers"] == {"Authorization": "Bearer SG.key"}
        assert body["personalizations"] == [{"to": [{"email": "anna@example.com"}]}]
        assert body["from"] == {"email": "noreply@ecofinance.app"}
        assert "evil.example\">" not in body["content"][0]["value"]

    def test_reset_email_uses_configured_ttl(self):
        response = MagicMock(status_code=202)
        with patch("ecofinance.application.email_service.requests.post", return_value=response) as post:
            self._sender().send_password_reset_email("anna@example.com", "tok", "http://localhost:3000")

        assert "30 минут" in post.call_args.kwargs["json"]["content"][0]["value"]

    def test_http_error_returns_false(self):
        response = MagicMock(status_code=401, text="unauthorized")
        with patch("ecofinance.application.email_service.requests.post", return_value=response):
            assert self._sender().send_welcome_email("anna@example.com", "Анна", "http://x") is False

    def test_network_error_returns_false(self):
        with patch(
            "ecofinance.application.email_service.requests.post",
            side_effect=requests.ConnectionError("down"),
        ):
            assert self._sender().send_password_reset_email("anna@example.com", "tok", "http://x") is False


def test_factory_without_api_key_uses_logging_stub():
    sender = create_email_sender(Settings(SENDGRID_API_KEY=""))
    assert isinstance(sender, LoggingEmailSender)
    assert sender.send_welcome_email("anna@example.com", "Анна", "http://x") is False


def test_factory_with_api_key():
    sender = create_email_sender(Settings(SENDGRID_API_KEY="SG.key", PASSWORD_RESET_TOKEN_TTL_MINUTES=15))
    assert isinstance(sender, SendGridEmailSender)
    assert sender.reset_ttl_minutes == 15
