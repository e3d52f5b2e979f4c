"""SQS queue integration."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .consumer import SQSNotificationConsumer
from .publisher import SQSNotificationPublisher
from .retry import RetryPolicy

__all__ = [
    "RetryPolicy",
    "SQSConnectionManager",
    "SQSNotificationConsumer",
    "SQSNotificationPublisher",
]
