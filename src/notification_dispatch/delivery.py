"""Channel, status and outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from .exceptions import InvalidArgumentError


class NotificationChannel(Enum):
    """Supported notification channels."""

    EMAIL = "email"
    SMS = "sms"
    IN_APP = "inapp"

    @classmethod
    def parse(cls, value: str) -> NotificationChannel:
        """Resolve a channel name case-insensitively."""
        normalized = (value or "").strip().lower()
        if not normalized:
            raise InvalidArgumentError("Channel cannot be empty")
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidArgumentError(f"Unsupported channel: {value}") from None

    @property
    def template_extension(self) -> str:
        return _TEMPLATE_EXTENSIONS[self]


_TEMPLATE_EXTENSIONS: dict[NotificationChannel, str] = {
    NotificationChannel.EMAIL: ".html",
    NotificationChannel.SMS: ".txt",
    NotificationChannel.IN_APP: ".txt",
}


class DeliveryStatus(Enum):
    """Status values persisted by the delivery ledger."""

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"
    RETRYING = "retrying"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one processing attempt, as written to the ledger."""

    status: DeliveryStatus
    retry_count: int
    delivered_at: datetime | None = None

    @classmethod
    def delivered(cls, at: datetime | None = None, retry_count: int = 0) -> DeliveryOutcome:
        """Notification reached the provider."""
        return cls(
            status=DeliveryStatus.DELIVERED,
            retry_count=retry_count,
            delivered_at=at or datetime.now(timezone.utc),
        )

    @classmethod
    def failed_terminal(cls, retry_count: int) -> DeliveryOutcome:
        """Failure that redelivery will not fix."""
        return cls(status=DeliveryStatus.FAILED, retry_count=retry_count)

    @classmethod
    def failed_retryable(cls, next_retry_count: int) -> DeliveryOutcome:
        """Failure eligible for another attempt."""
        return cls(status=DeliveryStatus.RETRYING, retry_count=next_retry_count)

    @property
    def is_terminal(self) -> bool:
        return self.status in (DeliveryStatus.DELIVERED, DeliveryStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED
