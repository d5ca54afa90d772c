"""Outbound email for one-time codes."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.errors import UpstreamError
from app.core.logging import mask_email

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your OTP for Note Taking App"


def _otp_email_html(otp: str, name: str, ttl_minutes: int) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #4F46E5;">Welcome to Note Taking App!</h2>
  <p>Hi {escape(name or "there")},</p>
  <p>Your OTP for verification is:</p>
  <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; text-align: center; margin: 20px 0;">
    <h1 style="color: #4F46E5; font-size: 32px; margin: 0;">{escape(otp)}</h1>
  </div>
  <p>This OTP will expire in {ttl_minutes} minutes.</p>
  <p>If you didn't request this, please ignore this email.</p>
</div>
"""


def _otp_email_text(otp: str, name: str, ttl_minutes: int) -> str:
    return (
        f"Hi {name or 'there'},\n\n"
        f"Your OTP for verification is {otp}.\n"
        f"This OTP will expire in {ttl_minutes} minutes.\n"
        "If you didn't request this, please ignore this email."
    )


class Mailer(Protocol):
    async def send_otp(self, email: str, otp: str, name: str) -> None: ...


class SmtpMailer:
    """Sends through an SMTP relay. Any transport failure becomes ``UpstreamError``."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def build_message(self, email: str, otp: str, name: str) -> EmailMessage:
        ttl = self.settings.otp_ttl_minutes
        message = EmailMessage()
        message["Subject"] = OTP_SUBJECT
        message["From"] = self.settings.email_from or self.settings.smtp_username
        message["To"] = email
        message.set_content(_otp_email_text(otp, name, ttl))
        message.add_alternative(_otp_email_html(otp, name, ttl), subtype="html")
        return message

    def _send(self, message: EmailMessage) -> None:
        s = self.settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds) as smtp:
            if s.smtp_use_tls:
                smtp.starttls()
            if s.smtp_username:
                smtp.login(s.smtp_username, s.smtp_password)
            smtp.send_message(message)

    async def send_otp(self, email: str, otp: str, name: str) -> None:
        if not self.settings.smtp_host:
            raise UpstreamError("SMTP host is not configured")
        message = self.build_message(email, otp, name)
        try:
            await run_in_threadpool(self._send, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Failed to send OTP email to %s", mask_email(email))
            raise UpstreamError(f"email delivery failed: {exc}") from exc
        logger.info("OTP email sent to %s", mask_email(email))


class ConsoleMailer:
    """Local development backend: writes the code to the log instead of sending it."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def send_otp(self, email: str, otp: str, name: str) -> None:
        logger.warning("[console email] OTP for %s (%s): %s", email, name, otp)


def build_mailer(settings: Settings) -> Mailer:
    if settings.email_backend == "console":
        return ConsoleMailer(settings)
    if settings.email_backend == "smtp":
        return SmtpMailer(settings)
    raise ValueError(f"Unknown email backend: {settings.email_backend!r}")
