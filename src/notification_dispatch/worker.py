"""NotificationQueueWorker — bridges queue messages to the processor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .correlation import correlation_scope
from .exceptions import MalformedMessageError, NotificationDeliveryFailed
from .serialization import RequestSerializer

if TYPE_CHECKING:
    from .processor import NotificationProcessor
    from .request import NotificationRequest

logger = logging.getLogger(__name__)


class NotificationQueueWorker:
    """
    Thin adapter between a queue consumer and the NotificationProcessor.

    ``handle`` returning normally means "acknowledge and delete the message".
    It raises NotificationDeliveryFailed when the processor reports failure,
    so the hosting queue redelivers the message after its visibility timeout.
    Malformed messages are logged and consumed; retrying cannot fix them.

    Usage::

        worker = NotificationQueueWorker(processor)
        consumer = SQSNotificationConsumer(connection, worker, "notifications")
        await consumer.run()
    """

    def __init__(
        self,
        processor: NotificationProcessor,
        *,
        serializer: RequestSerializer | None = None,
    ) -> None:
        self._processor = processor
        self._serializer = serializer or RequestSerializer()

    async def handle(
        self,
        body: bytes | str,
        *,
        message_id: str | None = None,
        delivery_count: int | None = None,
    ) -> None:
        """Decode and process one raw message body."""
        try:
            request = self._serializer.deserialize(body)
        except MalformedMessageError as e:
            logger.error(
                f"Failed to deserialize notification message. MessageId: {message_id}, "
                f"DeliveryCount: {delivery_count}, Error: {e}"
            )
            return
        await self._run(request, message_id=message_id, delivery_count=delivery_count)

    async def handle_payload(
        self,
        payload: dict[str, Any],
        *,
        message_id: str | None = None,
        delivery_count: int | None = None,
    ) -> None:
        """Process a message whose body the broker already decoded."""
        try:
            request = self._serializer.from_dict(payload)
        except MalformedMessageError as e:
            logger.error(f"Invalid notification payload. MessageId: {message_id}, Error: {e}")
            return
        await self._run(request, message_id=message_id, delivery_count=delivery_count)

    async def _run(
        self,
        request: NotificationRequest,
        *,
        message_id: str | None,
        delivery_count: int | None,
    ) -> None:
        request = self._effective_request(request, delivery_count)

        with correlation_scope(request.id):
            logger.info(
                f"Processing queue message. MessageId: {message_id}, "
                f"NotificationId: {request.id}, DeliveryCount: {delivery_count}, "
                f"Template: {request.template_name}, Channel: {request.channel}"
            )

            if await self._processor.process(request):
                logger.info(
                    f"Successfully processed notification {request.id} from queue "
                    f"(MessageId: {message_id})"
                )
                return

            logger.warning(
                f"Failed to process notification {request.id}. MessageId: {message_id}, "
                f"DeliveryCount: {delivery_count}. Message will be retried based on "
                f"queue configuration."
            )
            raise NotificationDeliveryFailed(request.id, request.retry_count)

    @staticmethod
    def _effective_request(
        request: NotificationRequest, delivery_count: int | None
    ) -> NotificationRequest:
        """
        Raise the retry count to what the broker has observed.

        A broker redelivering an unchanged body reports how many times it has
        handed the message out; attempts so far is that count minus one. The
        message value is never lowered.
        """
        if delivery_count is None or delivery_count < 1:
            return request
        observed = delivery_count - 1
        if observed > request.retry_count:
            logger.debug(
                f"Raising retry count of {request.id} from {request.retry_count} to {observed}"
            )
            return request.with_retry_count(observed)
        return request
