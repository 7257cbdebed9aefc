from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage

from core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

VERIFICATION_TTL_HOURS = 24
PASSWORD_RESET_TTL_HOURS = 1


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


def build_verification_email(*, token: str, name: str, frontend_url: str) -> EmailContent:
    link = f"{frontend_url}/verify-email?token={token}"
    text = (
        f"Hi {name},\n\n"
        "Thank you for signing up! Please verify your email address by visiting this link:\n\n"
        f"{link}\n\n"
        f"This link will expire in {VERIFICATION_TTL_HOURS} hours.\n\n"
        "If you didn't create an account, you can safely ignore this email."
    )
    html = (
        f"<p>Hi {name},</p>"
        "<p>Thank you for signing up! Please verify your email address:</p>"
        f'<p><a href="{link}">Verify Email</a></p>'
        f"<p>This link will expire in {VERIFICATION_TTL_HOURS} hours.</p>"
    )
    return EmailContent(subject="Verify your email address", html=html, text=text)


def build_password_reset_email(*, token: str, name: str, frontend_url: str) -> EmailContent:
    link = f"{frontend_url}/reset-password?token={token}"
    text = (
        f"Hi {name},\n\n"
        "We received a request to reset your password. Visit this link to create a new password:\n\n"
        f"{link}\n\n"
        f"This link will expire in {PASSWORD_RESET_TTL_HOURS} hour.\n\n"
        "If you didn't request a password reset, you can safely ignore this email."
    )
    html = (
        f"<p>Hi {name},</p>"
        "<p>We received a request to reset your password.</p>"
        f'<p><a href="{link}">Reset Password</a></p>'
        f"<p>This link will expire in {PASSWORD_RESET_TTL_HOURS} hour.</p>"
    )
    return EmailContent(subject="Reset your password", html=html, text=text)


def _build_message(*, settings: Settings, to: str, content: EmailContent) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.email_from
    message["To"] = to
    message["Subject"] = content.subject
    message.set_content(content.text)
    message.add_alternative(content.html, subtype="html")
    return message


def _deliver(settings: Settings, message: EmailMessage) -> None:
    context = ssl.create_default_context()
    if settings.email_use_ssl:
        with smtplib.SMTP_SSL(settings.email_host, settings.email_port, context=context) as smtp:
            if settings.email_username and settings.email_password:
                smtp.login(settings.email_username, settings.email_password)
            smtp.send_message(message)
        return

    with smtplib.SMTP(settings.email_host, settings.email_port) as smtp:
        smtp.starttls(context=context)
        if settings.email_username and settings.email_password:
            smtp.login(settings.email_username, settings.email_password)
        smtp.send_message(message)


async def send_email(*, to: str, subject: str, html: str, text: str, settings: Settings | None = None) -> bool:
    """Send one email; returns False when SMTP is not configured and the email was only logged."""
    settings = settings or get_settings()
    content = EmailContent(subject=subject, html=html, text=text)

    if not settings.email_host:
        if settings.is_production:
            logger.warning("EMAIL_HOST not configured; email to %s was not sent", to)
        else:
            logger.info("Email not sent (SMTP not configured)\nTo: %s\nSubject: %s\n\n%s", to, subject, text)
        return False

    message = _build_message(settings=settings, to=to, content=content)
    await asyncio.to_thread(_deliver, settings, message)
    return True
