"""Unit tests for SmtpEmailSender with a mocked aiosmtplib client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from notification_dispatch.email.smtp import SmtpEmailSender
from notification_dispatch.exceptions import NotificationConfigurationError
from notification_dispatch.ports.sender import IEmailSender


@pytest.fixture
def smtp_client() -> MagicMock:
    client = MagicMock()
    client.starttls = AsyncMock()
    client.login = AsyncMock()
    client.send_message = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


@pytest.fixture
def smtp_factory(smtp_client: MagicMock):
    with patch("notification_dispatch.email.smtp.aiosmtplib.SMTP", return_value=smtp_client) as f:
        yield f


@pytest.fixture
def sender() -> SmtpEmailSender:
    return SmtpEmailSender(
        host="smtp.example.com",
        username="mailer",
        password="s3cret",
        from_email="noreply@example.com",
        from_name="Example",
    )


def test_implements_port(sender):
    assert isinstance(sender, IEmailSender)


@pytest.mark.parametrize("field", ["host", "username", "password", "from_email"])
def test_missing_configuration_raises(field):
    config = {
        "host": "smtp.example.com",
        "username": "mailer",
        "password": "s3cret",
        "from_email": "noreply@example.com",
    }
    config[field] = ""

    with pytest.raises(NotificationConfigurationError, match=field):
        SmtpEmailSender(**config)


def test_build_message(sender):
    message = sender.build_message("a@b.com", "Welcome!", "<p>Hi Ann</p>")

    assert message["To"] == "a@b.com"
    assert message["From"] == "Example <noreply@example.com>"
    assert message["Subject"] == "Welcome!"
    assert message.get_content_type() == "text/html"
    assert "<p>Hi Ann</p>" in message.get_content()


@pytest.mark.asyncio
async def test_send_success(sender, smtp_factory, smtp_client):
    assert await sender.send("a@b.com", "Welcome!", "<p>Hi</p>") is True

    assert smtp_factory.call_args.kwargs["hostname"] == "smtp.example.com"
    assert smtp_factory.call_args.kwargs["port"] == 587
    assert smtp_factory.call_args.kwargs["timeout"] == 30.0
    smtp_client.starttls.assert_awaited_once()
    smtp_client.login.assert_awaited_once_with("mailer", "s3cret")
    smtp_client.send_message.assert_awaited_once()


@pytest.mark.asyncio
async def test_logs_mask_recipient(sender, smtp_factory, smtp_client, caplog):
    caplog.set_level("INFO")

    await sender.send("alice@example.com", "Hi", "body")
    smtp_client.login.side_effect = aiosmtplib.SMTPAuthenticationError(535, "bad credentials")
    await sender.send("alice@example.com", "Hi", "body")

    assert "alice@example.com" not in caplog.text
    assert "Email sent successfully to a***@example.com" in caplog.text
    assert "SMTP error sending email to a***@example.com" in caplog.text


@pytest.mark.asyncio
async def test_send_without_tls(smtp_factory, smtp_client):
    sender = SmtpEmailSender("localhost", "u", "p", "noreply@example.com", use_tls=False, port=25)

    assert await sender.send("a@b.com", "Hi", "body") is True

    smtp_client.starttls.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_recipient_returns_false(sender, smtp_factory):
    assert await sender.send("", "Hi", "body") is False

    smtp_factory.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        aiosmtplib.SMTPAuthenticationError(535, "bad credentials"),
        ConnectionRefusedError("refused"),
        asyncio.TimeoutError(),
        RuntimeError("unexpected"),
    ],
)
async def test_failures_return_false(sender, smtp_factory, smtp_client, error):
    smtp_client.login.side_effect = error

    assert await sender.send("a@b.com", "Hi", "body") is False
