"""Memory adapters for testing and development."""

from __future__ import annotations

from notification_dispatch.memory.ledger import InMemoryDeliveryLedger, LedgerCall, LedgerEntry
from notification_dispatch.memory.queue import InMemoryNotificationQueue
from notification_dispatch.memory.senders import InMemoryEmailSender, InMemorySmsSender, SentMessage
from notification_dispatch.memory.templates import InMemoryTemplateStore

__all__ = [
    "InMemoryDeliveryLedger",
    "InMemoryEmailSender",
    "InMemoryNotificationQueue",
    "InMemorySmsSender",
    "InMemoryTemplateStore",
    "LedgerCall",
    "LedgerEntry",
    "SentMessage",
]
