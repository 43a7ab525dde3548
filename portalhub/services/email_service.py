"""Transactional email delivery over SMTP with a Mailgun fallback."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

import requests

from ..config import get_settings
from ..security.secrets import MissingSecretError, is_placeholder, require_secret

logger = logging.getLogger(__name__)

MAILGUN_API_BASE = "https://api.mailgun.net/v3"


class EmailDeliveryError(RuntimeError):
    """Raised when no transport could deliver a message."""


def _secret(name: str) -> str:
    try:
        return require_secret(name)
    except MissingSecretError as exc:
        raise EmailDeliveryError(str(exc)) from exc


def smtp_configured() -> bool:
    settings = get_settings()
    return bool(settings.email_host and settings.email_from_address)


def mailgun_configured() -> bool:
    settings = get_settings()
    if is_placeholder(settings.mailgun_api_key):
        return False
    return bool(settings.mailgun_domain and settings.email_from_address)


def _send_via_smtp(message: EmailMessage) -> None:
    settings = get_settings()
    username = (settings.email_username or "").strip()
    try:
        with smtplib.SMTP(settings.email_host, settings.email_port, timeout=20) as smtp:
            if settings.email_use_tls:
                smtp.starttls()
            if username:
                smtp.login(username, _secret("EMAIL_PASSWORD"))
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as exc:  # pragma: no cover - network interactions
        logger.exception("SMTP delivery failed for %s", message["To"])
        raise EmailDeliveryError(str(exc)) from exc


def _send_via_mailgun(message: EmailMessage) -> None:
    settings = get_settings()
    url = f"{MAILGUN_API_BASE}/{settings.mailgun_domain}/messages"
    try:
        response = requests.post(
            url,
            auth=("api", _secret("MAILGUN_API_KEY")),
            data={
                "from": message["From"],
                "to": message["To"],
                "subject": message["Subject"],
                "text": message.get_content(),
            },
            timeout=20,
        )
    except requests.RequestException as exc:  # pragma: no cover - network interactions
        logger.exception("Mailgun request failed for %s", message["To"])
        raise EmailDeliveryError(str(exc)) from exc

    if response.status_code >= 400:
        logger.error("Mailgun returned %s: %s", response.status_code, response.text)
        raise EmailDeliveryError(f"Mailgun delivery failed with status {response.status_code}")


def send_email(to_address: str, subject: str, body: str) -> None:
    """Send a plaintext message, trying SMTP first and Mailgun second."""

    if not to_address or not subject or not body:
        raise EmailDeliveryError("Email payload is incomplete")

    use_smtp = smtp_configured()
    use_mailgun = mailgun_configured()
    if not use_smtp and not use_mailgun:
        raise EmailDeliveryError("Email delivery is not configured")

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = str(get_settings().email_from_address)
    message["To"] = to_address
    message.set_content(body)

    if use_smtp:
        try:
            _send_via_smtp(message)
            return
        except EmailDeliveryError as exc:
            if not use_mailgun:
                raise
            logger.warning("SMTP delivery failed, falling back to Mailgun: %s", exc)

    _send_via_mailgun(message)


def send_password_reset_email(to_address: str, reset_link: str) -> None:
    settings = get_settings()
    body = (
        f"We received a request to reset the password for your {settings.app_name} account.\n\n"
        f"Open the link below to choose a new password. It expires in "
        f"{settings.password_reset_minutes} minutes.\n\n{reset_link}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    send_email(to_address, f"Reset your {settings.app_name} password", body)


__all__ = ["EmailDeliveryError", "send_email", "send_password_reset_email"]
