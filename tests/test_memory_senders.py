"""Tests for in-memory senders."""

import pytest

from notification_dispatch.delivery import NotificationChannel
from notification_dispatch.memory import InMemoryEmailSender, InMemorySmsSender
from notification_dispatch.ports.sender import IEmailSender, ISmsSender


@pytest.mark.asyncio
async def test_email_sender_records_messages():
    sender = InMemoryEmailSender()

    assert await sender.send("a@b.com", "Welcome!", "<p>Hi</p>") is True

    assert isinstance(sender, IEmailSender)
    assert sender.last.subject == "Welcome!"
    assert sender.last.channel is NotificationChannel.EMAIL
    sender.assert_sent("a@b.com")


@pytest.mark.asyncio
async def test_sms_sender_scripted_failure():
    sender = InMemorySmsSender(result=False)

    assert await sender.send("+15551234567", "hi") is False

    assert isinstance(sender, ISmsSender)
    sender.assert_sent("+15551234567")


@pytest.mark.asyncio
async def test_sender_error_is_raised_after_recording():
    sender = InMemorySmsSender(error=RuntimeError("down"))

    with pytest.raises(RuntimeError):
        await sender.send("+15551234567", "hi")

    assert len(sender.sent_messages) == 1


@pytest.mark.asyncio
async def test_assert_sent_failure_and_clear():
    sender = InMemoryEmailSender()
    await sender.send("a@b.com", "s", "b")

    with pytest.raises(AssertionError, match="Expected 2 messages"):
        sender.assert_sent("a@b.com", count=2)

    sender.clear()
    with pytest.raises(AssertionError, match="No messages sent"):
        _ = sender.last
