"""Channel transport ports.

Ordinary delivery failures (provider rejected, network error, invalid number,
timeout) are reported as ``False``. Exceptions are reserved for programming
errors and construction-time configuration errors.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IEmailSender(Protocol):
    """Port for delivering an HTML email."""

    async def send(self, recipient: str, subject: str, html_body: str) -> bool:
        """Send email and return whether the provider accepted it."""
        ...


@runtime_checkable
class ISmsSender(Protocol):
    """Port for delivering a text message."""

    async def send(self, recipient: str, text_body: str) -> bool:
        """Send SMS and return whether the provider accepted it."""
        ...
