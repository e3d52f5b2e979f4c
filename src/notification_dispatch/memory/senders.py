"""In-memory senders for test assertions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..delivery import NotificationChannel
from ..ports.sender import IEmailSender, ISmsSender

logger = logging.getLogger(__name__)


@dataclass
class SentMessage:
    """Record of a send attempt for test assertions."""

    recipient: str
    body: str
    channel: NotificationChannel
    subject: str | None = None


class _RecordingSender:
    """Shared recording and scripted-result behaviour."""

    channel: NotificationChannel

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.sent_messages: list[SentMessage] = []

    def _record(self, message: SentMessage) -> bool:
        self.sent_messages.append(message)
        if self.error is not None:
            raise self.error
        return self.result

    def assert_sent(self, recipient: str, count: int = 1) -> None:
        """Helper for test assertions."""
        matches = [m for m in self.sent_messages if m.recipient == recipient]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} messages to {recipient} via {self.channel.value}, "
                f"but found {len(matches)}."
            )

    @property
    def last(self) -> SentMessage:
        """Most recent send attempt."""
        if not self.sent_messages:
            raise AssertionError(f"No messages sent via {self.channel.value}")
        return self.sent_messages[-1]

    def clear(self) -> None:
        """Clear all recorded messages."""
        self.sent_messages.clear()


class InMemoryEmailSender(_RecordingSender, IEmailSender):
    """
    Test double (Fake) email port.

    Returns ``result`` for every call, or raises ``error`` when set.
    """

    channel = NotificationChannel.EMAIL

    async def send(self, recipient: str, subject: str, html_body: str) -> bool:
        return self._record(SentMessage(recipient, html_body, self.channel, subject))


class InMemorySmsSender(_RecordingSender, ISmsSender):
    """Test double (Fake) SMS port."""

    channel = NotificationChannel.SMS

    async def send(self, recipient: str, text_body: str) -> bool:
        return self._record(SentMessage(recipient, text_body, self.channel))
