"""SMS transport adapters."""

from __future__ import annotations

from .twilio import TwilioSmsSender

__all__ = ["TwilioSmsSender"]
