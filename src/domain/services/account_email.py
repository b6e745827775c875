"""
Account emails: welcome messages and password reset links.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

import structlog
from src.core.config import get_settings
from src.libs.resend_client import ResendClient, ResendClientError

logger = structlog.get_logger(__name__)


class EmailDeliveryError(Exception):
    """Raised when email delivery fails."""


@dataclass(slots=True)
class PasswordResetEmail:
    to_email: str
    first_name: str
    reset_url: str


@dataclass(slots=True)
class WelcomeEmail:
    to_email: str
    first_name: str
    temporary_password: str


class AccountEmailService:
    """Send account lifecycle emails via Resend."""

    def __init__(self, client: ResendClient | None = None) -> None:
        self.client = client or ResendClient()
        self.settings = get_settings()

    async def send_password_reset(self, message: PasswordResetEmail) -> str:
        ttl_minutes = self.settings.password_reset_ttl_seconds // 60
        expiry_text = "1 hour" if ttl_minutes == 60 else f"{ttl_minutes} minutes"
        reset_url = escape(message.reset_url)
        html_body = _wrap(
            f"<p>Hi {escape(message.first_name)},</p>"
            "<p>We received a request to reset your password. "
            "Use the link below to choose a new one.</p>"
            f'<p><a href="{reset_url}">Reset Password</a></p>'
            f"<p>This link expires in <strong>{expiry_text}</strong>. If you didn't request "
            "a password reset, you can safely ignore this email.</p>"
        )
        text_body = "\n".join(
            [
                f"Hi {message.first_name},",
                "",
                "We received a request to reset your password. Open the link below to choose "
                "a new one:",
                message.reset_url,
                "",
                f"This link expires in {expiry_text}.",
            ]
        )
        return await self._send(
            kind="password_reset",
            to_email=message.to_email,
            subject="Reset your password",
            html=html_body,
            text=text_body,
        )

    async def send_welcome(self, message: WelcomeEmail) -> str:
        login_url = f"{self.settings.app_base_url.rstrip('/')}/login"
        html_body = _wrap(
            f"<p>Hi {escape(message.first_name)},</p>"
            "<p>Your account has been created. Use the credentials below to sign in.</p>"
            f"<p>Email: <strong>{escape(message.to_email)}</strong><br>"
            f"Temporary password: <code>{escape(message.temporary_password)}</code></p>"
            "<p>Please change your password after signing in from the Settings page.</p>"
            f'<p><a href="{escape(login_url)}">Sign in to your account</a></p>'
        )
        text_body = "\n".join(
            [
                f"Hi {message.first_name},",
                "",
                "Your account has been created.",
                f"Email: {message.to_email}",
                f"Temporary password: {message.temporary_password}",
                "",
                f"Sign in at {login_url} and change your password from the Settings page.",
            ]
        )
        return await self._send(
            kind="welcome",
            to_email=message.to_email,
            subject="Welcome - your account is ready",
            html=html_body,
            text=text_body,
        )

    async def _send(self, *, kind: str, to_email: str, subject: str, html: str, text: str) -> str:
        try:
            response = await self.client.send_email(
                from_email=self.settings.resend_from_email,
                to_emails=[to_email],
                subject=subject,
                html=html,
                text=text,
            )
        except ResendClientError as exc:
            await logger.aerror(
                "account_email_failed", kind=kind, to_email=to_email, error=str(exc)
            )
            raise EmailDeliveryError(f"Failed to send {kind} email") from exc

        await logger.ainfo(
            "account_email_sent", kind=kind, to_email=to_email, resend_id=response.id
        )
        return response.id


def _wrap(body: str) -> str:
    return (
        "<!DOCTYPE html><html><body>"
        f"{body}"
        "<p>Thank you,<br>Commission Tracker</p>"
        "</body></html>"
    )


async def deliver_in_background(
    emails: AccountEmailService, message: PasswordResetEmail | WelcomeEmail
) -> None:
    """Background-task entry point; delivery failures are logged only."""
    try:
        if isinstance(message, PasswordResetEmail):
            await emails.send_password_reset(message)
        else:
            await emails.send_welcome(message)
    except EmailDeliveryError:
        await logger.awarning("account_email_dropped", to_email=message.to_email)
