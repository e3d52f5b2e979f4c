"""Exception hierarchy for notification dispatch."""

from __future__ import annotations

import enum


class NotificationError(Exception):
    """Root exception for the notification dispatch worker."""


class InvalidArgumentError(NotificationError, ValueError):
    """Raised for bad input: empty template name/channel, unsupported channel."""


class NotFoundKind(str, enum.Enum):
    """What the template store could not find."""

    CHANNEL_DIRECTORY = "channel_directory"
    TEMPLATE_FILE = "template_file"


class TemplateNotFoundError(NotificationError):
    """Raised when a channel directory or template file does not exist."""

    def __init__(self, kind: NotFoundKind, template_name: str, channel: str, path: str):
        self.kind = kind
        self.template_name = template_name
        self.channel = channel
        self.path = path
        if kind is NotFoundKind.CHANNEL_DIRECTORY:
            message = f"Channel directory not found: {path}"
        else:
            message = f"Template file not found: {path}"
        super().__init__(message)


class MalformedMessageError(NotificationError):
    """Raised when an inbound queue message cannot be decoded into a request."""


class NotificationConfigurationError(NotificationError):
    """Raised at construction time when a transport is misconfigured."""


class LedgerError(NotificationError):
    """Raised when the delivery ledger cannot persist a status update."""


class QueueConnectionError(NotificationError):
    """Raised when connectivity to the queue service fails."""


class NotificationDeliveryFailed(NotificationError):
    """Raised by the queue worker to hand a message back for redelivery."""

    def __init__(self, notification_id: str, retry_count: int):
        self.notification_id = notification_id
        self.retry_count = retry_count
        super().__init__(
            f"Failed to process notification {notification_id} (retry count: {retry_count})"
        )
