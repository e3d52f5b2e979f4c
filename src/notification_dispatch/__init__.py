"""Queue-driven notification dispatch: templates, Email/SMS transports, delivery ledger."""

from __future__ import annotations

from .correlation import CorrelationIdFilter, correlation_scope, get_correlation_id
from .delivery import DeliveryOutcome, DeliveryStatus, NotificationChannel
from .exceptions import (
    InvalidArgumentError,
    LedgerError,
    MalformedMessageError,
    NotFoundKind,
    NotificationConfigurationError,
    NotificationDeliveryFailed,
    NotificationError,
    QueueConnectionError,
    TemplateNotFoundError,
)
from .ports.ledger import IDeliveryLedger
from .ports.sender import IEmailSender, ISmsSender
from .ports.template import ITemplateRenderer, ITemplateStore
from .processor import DEFAULT_SUBJECT, MAX_RETRIES, NotificationProcessor
from .request import NotificationRequest
from .sanitization import ContextSanitizer
from .serialization import RequestSerializer

# Template resolution
from .template.renderer import PlaceholderRenderer
from .template.store import FileSystemTemplateStore
from .worker import NotificationQueueWorker

__all__ = [
    "DEFAULT_SUBJECT",
    "MAX_RETRIES",
    "ContextSanitizer",
    "CorrelationIdFilter",
    "DeliveryOutcome",
    "DeliveryStatus",
    "FileSystemTemplateStore",
    "IDeliveryLedger",
    "IEmailSender",
    "ISmsSender",
    "ITemplateRenderer",
    "ITemplateStore",
    "InvalidArgumentError",
    "LedgerError",
    "MalformedMessageError",
    "NotFoundKind",
    "NotificationChannel",
    "NotificationConfigurationError",
    "NotificationDeliveryFailed",
    "NotificationError",
    "NotificationProcessor",
    "NotificationQueueWorker",
    "NotificationRequest",
    "PlaceholderRenderer",
    "QueueConnectionError",
    "RequestSerializer",
    "TemplateNotFoundError",
    "correlation_scope",
    "get_correlation_id",
]
