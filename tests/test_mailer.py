"""Tests for OTP email delivery backends."""
import smtplib
from unittest.mock import patch

import pytest

from app.core.errors import UpstreamError
from app.services.mailer import OTP_SUBJECT, ConsoleMailer, SmtpMailer, build_mailer
from tests.helpers import make_settings


@pytest.fixture
def smtp_settings(tmp_path):
    return make_settings(
        tmp_path,
        email_backend="smtp",
        smtp_host="smtp.example.com",
        smtp_port=2525,
        smtp_username="mailer@example.com",
        smtp_password="pw",
        email_from="Notes <no-reply@example.com>",
    )


def test_build_mailer_picks_backend(tmp_path, smtp_settings):
    assert isinstance(build_mailer(smtp_settings), SmtpMailer)
    assert isinstance(build_mailer(make_settings(tmp_path)), ConsoleMailer)
    with pytest.raises(ValueError):
        build_mailer(make_settings(tmp_path, email_backend="pigeon"))


def test_message_contents(smtp_settings):
    message = SmtpMailer(smtp_settings).build_message("alice@example.com", "042917", "<Alice>")

    assert message["Subject"] == OTP_SUBJECT
    assert message["To"] == "alice@example.com"
    assert message["From"] == "Notes <no-reply@example.com>"
    text = message.get_body(("plain",)).get_content()
    html = message.get_body(("html",)).get_content()
    assert "042917" in text and "10 minutes" in text
    assert "042917" in html
    assert "&lt;Alice&gt;" in html


@pytest.mark.asyncio
async def test_smtp_send(smtp_settings):
    with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
        await SmtpMailer(smtp_settings).send_otp("alice@example.com", "123456", "Alice")

    smtp_cls.assert_called_once_with("smtp.example.com", 2525, timeout=10.0)
    smtp = smtp_cls.return_value.__enter__.return_value
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("mailer@example.com", "pw")
    sent = smtp.send_message.call_args.args[0]
    assert sent["To"] == "alice@example.com"


@pytest.mark.asyncio
async def test_smtp_failure_becomes_upstream_error(smtp_settings):
    with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value.__enter__.return_value
        smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        with pytest.raises(UpstreamError):
            await SmtpMailer(smtp_settings).send_otp("alice@example.com", "123456", "Alice")


@pytest.mark.asyncio
async def test_smtp_without_host(tmp_path):
    with pytest.raises(UpstreamError):
        await SmtpMailer(make_settings(tmp_path, email_backend="smtp")).send_otp("a@example.com", "123456", "A")


@pytest.mark.asyncio
async def test_console_mailer_logs_code(tmp_path, caplog):
    with caplog.at_level("WARNING", logger="app.services.mailer"):
        await ConsoleMailer(make_settings(tmp_path)).send_otp("a@example.com", "654321", "A")
    assert "654321" in caplog.text
