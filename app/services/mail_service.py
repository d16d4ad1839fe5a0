"""Transactional email delivery through Resend."""

from __future__ import annotations

import logging
from html import escape
from typing import Dict, Optional

import resend

from app.config import settings

from .exceptions import IntegrationConfigurationError, MailDeliveryError

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify your email address"
RESET_PASSWORD_SUBJECT = "Reset your password"


def build_verification_link(verify_token: str) -> str:
    return f"{settings.API_BASE_URL.rstrip('/')}/api/auth/verify-email?token={verify_token}"


def build_reset_password_link(user_id: str, reset_token: str) -> str:
    return (
        f"{settings.DOMAIN_URL.rstrip('/')}/account/reset-password"
        f"?id={user_id}&reset_password_token={reset_token}"
    )


def _action_email_html(name: str, intro: str, link: str, action: str, outro: str) -> str:
    return (
        f"<p>Hi {escape(name)},</p>"
        f"<p>{intro}</p>"
        f'<p><a href="{escape(link, quote=True)}">{action}</a></p>'
        f"<p>{outro}</p>"
    )


class MailService:
    def __init__(self, api_key: Optional[str] = None, sender: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.sender = sender or settings.MAIL_FROM

    def send(self, to: str, subject: str, html: str, text: str) -> Dict:
        if not self.api_key:
            raise IntegrationConfigurationError("RESEND_API_KEY is not configured")

        resend.api_key = self.api_key
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
            "text": text,
        }
        try:
            response = resend.Emails.send(payload)
        except Exception as e:
            raise MailDeliveryError(f"Failed to send '{subject}' to {to}: {e}") from e

        logger.info("Sent '%s' email to %s", subject, to)
        return response

    def send_verification_email(self, email: str, name: str, verify_token: str) -> Dict:
        link = build_verification_link(verify_token)
        minutes = settings.EMAIL_VERIFY_TOKEN_EXPIRE_MINUTES
        html = _action_email_html(
            name,
            "Thanks for signing up. Please confirm your email address.",
            link,
            "Verify email",
            f"This link expires in {minutes} minutes.",
        )
        text = f"Hi {name}, confirm your email address within {minutes} minutes: {link}"
        return self.send(email, VERIFY_SUBJECT, html, text)

    def send_reset_password_email(self, email: str, name: str, link: str) -> Dict:
        minutes = settings.RESET_PASSWORD_EXPIRE_MINUTES
        html = _action_email_html(
            name,
            "We received a request to reset your password.",
            link,
            "Reset password",
            f"The link expires in {minutes} minutes. "
            "If you did not ask for this, you can ignore this email.",
        )
        text = f"Hi {name}, reset your password within {minutes} minutes: {link}"
        return self.send(email, RESET_PASSWORD_SUBJECT, html, text)
