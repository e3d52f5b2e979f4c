"""Email transport adapters."""

from __future__ import annotations

from .smtp import SmtpEmailSender

__all__ = ["SmtpEmailSender"]
