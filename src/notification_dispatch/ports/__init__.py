"""Port definitions for the notification pipeline."""

from __future__ import annotations

from notification_dispatch.ports.ledger import IDeliveryLedger
from notification_dispatch.ports.sender import IEmailSender, ISmsSender
from notification_dispatch.ports.template import ITemplateRenderer, ITemplateStore

__all__ = [
    "IDeliveryLedger",
    "IEmailSender",
    "ISmsSender",
    "ITemplateRenderer",
    "ITemplateStore",
]
