"""
Outgoing email.

Handlers receive an ``EmailSender`` through a FastAPI dependency. Delivery
never raises: senders return True on success and False otherwise, so a mail
outage cannot break registration or password reset.
"""
import logging
from pathlib import Path
from typing import Protocol

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ecofinance.config import Settings

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"

# Templates (autoescape: user input such as first_name ends up in the HTML)
templates_dir = Path(__file__).parent.parent / "templates"
templates = Environment(
    loader=FileSystemLoader(str(templates_dir)),
    autoescape=select_autoescape(["html"]),
)


class EmailSender(Protocol):
    def send_password_reset_email(self, to: str, reset_token: str, frontend_url: str) -> bool: ...

    def send_welcome_email(self, to: str, first_name: str, frontend_url: str) -> bool: ...


def build_reset_link(frontend_url: str, reset_token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={reset_token}"


def render_password_reset_email(reset_link: str, ttl_minutes: int) -> str:
    return templates.get_template("email/password_reset.html").render(
        reset_link=reset_link,
        ttl_minutes=ttl_minutes,
    )


def render_welcome_email(first_name: str, frontend_url: str) -> str:
    return templates.get_template("email/welcome.html").render(
        first_name=first_name,
        dashboard_url=f"{frontend_url.rstrip('/')}/dashboard",
    )


class SendGridEmailSender:
    """Delivers mail through the SendGrid v3 HTTP API."""

    def __init__(self, api_key: str, from_email: str, reset_ttl_minutes: int = 60, timeout: float = 5):
        self.api_key = api_key
        self.from_email = from_email
        self.reset_ttl_minutes = reset_ttl_minutes
        self.timeout = timeout

    def _send(self, to: str, subject: str, html: str) -> bool:
        try:
            resp = requests.post(
                SENDGRID_SEND_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "personalizations": [{"to": [{"email": to}]}],
                    "from": {"email": self.from_email},
                    "subject": subject,
                    "content": [{"type": "text/html", "value": html}],
                },
                timeout=self.timeout,
            )
        except requests.RequestException:
            logger.exception("Email send failed: subject=%s", subject)
            return False

        if resp.status_code >= 300:
            logger.error("SendGrid error (HTTP %d): %s", resp.status_code, resp.text[:200])
            return False
        return True

    def send_password_reset_email(self, to: str, reset_token: str, frontend_url: str) -> bool:
        link = build_reset_link(frontend_url, reset_token)
        html = render_password_reset_email(link, self.reset_ttl_minutes)
        return self._send(to, "Восстановление пароля - EcoFinance", html)

    def send_welcome_email(self, to: str, first_name: str, frontend_url: str) -> bool:
        html = render_welcome_email(first_name, frontend_url)
        return self._send(to, "Добро пожаловать в EcoFinance! 🌱", html)


class LoggingEmailSender:
    """Used while SENDGRID_API_KEY is empty: logs and returns False."""

    def send_password_reset_email(self, to: str, reset_token: str, frontend_url: str) -> bool:
        logger.warning("SendGrid not configured, skipping password reset email")
        return False

    def send_welcome_email(self, to: str, first_name: str, frontend_url: str) -> bool:
        logger.warning("SendGrid not configured, skipping welcome email")
        return False


def create_email_sender(settings: Settings) -> EmailSender:
    if settings.SENDGRID_API_KEY:
        return SendGridEmailSender(
            settings.SENDGRID_API_KEY,
            settings.EMAIL_FROM,
            reset_ttl_minutes=settings.PASSWORD_RESET_TOKEN_TTL_MINUTES,
        )
    return LoggingEmailSender()
