"""SQSNotificationPublisher — enqueue notification requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..serialization import RequestSerializer

if TYPE_CHECKING:
    from ..request import NotificationRequest
    from .connection import SQSConnectionManager

logger = logging.getLogger(__name__)


class SQSNotificationPublisher:
    """Publishes NotificationRequest messages to an SQS queue.

    FIFO queues use the notification id as deduplication id and the channel
    as message group.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        queue_name: str = "notifications",
        *,
        serializer: RequestSerializer | None = None,
    ) -> None:
        self._connection = connection
        self._queue_name = queue_name
        self._serializer = serializer or RequestSerializer()

    async def publish(self, request: NotificationRequest) -> str:
        """Send *request* and return the SQS message id."""
        queue_url = await self._connection.get_queue_url(self._queue_name)
        client = await self._connection.get_client()
        send_kwargs: dict[str, Any] = {
            "QueueUrl": queue_url,
            "MessageBody": self._serializer.serialize(request).decode("utf-8"),
        }
        if queue_url.endswith(".fifo"):
            send_kwargs["MessageDeduplicationId"] = request.id
            send_kwargs["MessageGroupId"] = request.channel or "default"
        out = await client.send_message(**send_kwargs)
        message_id = str(out.get("MessageId", ""))
        logger.info(f"Notification {request.id} enqueued (MessageId: {message_id})")
        return message_id
