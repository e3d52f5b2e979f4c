"""SQSNotificationConsumer — long-polling loop feeding the queue worker."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import NotificationDeliveryFailed, QueueConnectionError
from .retry import RetryPolicy

if TYPE_CHECKING:
    from ..worker import NotificationQueueWorker
    from .connection import SQSConnectionManager

logger = logging.getLogger(__name__)


class SQSNotificationConsumer:
    """SQS consumer for notification requests.

    Long-polls the queue, hands each message to the worker and:

    * deletes the message when the worker returns normally (delivered, or
      malformed and consumed);
    * otherwise shortens the message's visibility timeout to the retry
      policy's backoff so SQS redelivers it. Poison messages are moved by the
      queue's redrive policy once its ``maxReceiveCount`` is reached.

    ``ApproximateReceiveCount`` is passed to the worker as the delivery count.
    The queue's ``maxReceiveCount`` is read once so the final failed receive
    of a notification is logged as an error before it is dead-lettered.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        worker: NotificationQueueWorker,
        queue_name: str = "notifications",
        *,
        wait_time_seconds: int = 20,
        visibility_timeout: int = 30,
        max_messages: int = 10,
        concurrency: int = 10,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Configure consumer.

        Args:
            connection: Shared connection manager.
            worker: Worker that processes one message body.
            queue_name: Queue to poll.
            wait_time_seconds: Long-poll wait.
            visibility_timeout: Visibility timeout for received messages.
            max_messages: Messages per receive call (SQS maximum is 10).
            concurrency: Messages processed at the same time.
            retry_policy: Backoff used as visibility timeout after a failure.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._connection = connection
        self._worker = worker
        self._queue_name = queue_name
        self._wait_time_seconds = wait_time_seconds
        self._visibility_timeout = visibility_timeout
        self._max_messages = max_messages
        self._retry_policy = retry_policy or RetryPolicy()
        self._semaphore = asyncio.Semaphore(concurrency)
        self._running = False
        self._max_receive_count: int | None = None
        self._redrive_loaded = False

    async def process_message(self, client: Any, queue_url: str, msg: dict[str, Any]) -> None:
        """Handle one SQS message: invoke worker, then delete or release."""
        body = msg.get("Body", "")
        receipt = msg["ReceiptHandle"]
        message_id = msg.get("MessageId")
        receive_count = int((msg.get("Attributes") or {}).get("ApproximateReceiveCount", 1))

        try:
            await self._worker.handle(body, message_id=message_id, delivery_count=receive_count)
        except NotificationDeliveryFailed as e:
            if self._is_last_receive(receive_count):
                logger.error(
                    f"{e}; message {message_id} reached maxReceiveCount "
                    f"({self._max_receive_count}) and will be dead-lettered"
                )
            else:
                logger.warning(f"{e}; releasing message {message_id} for redelivery")
            await self._release(client, queue_url, receipt, receive_count)
            return
        except Exception:  # noqa: BLE001
            logger.error(f"Error processing queue message {message_id}", exc_info=True)
            await self._release(client, queue_url, receipt, receive_count)
            return

        await client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt)

    def _is_last_receive(self, receive_count: int) -> bool:
        return self._max_receive_count is not None and receive_count >= self._max_receive_count

    async def _load_redrive_limit(self) -> None:
        if self._redrive_loaded:
            return
        self._redrive_loaded = True
        try:
            self._max_receive_count = await self._connection.redrive_max_receive_count(
                self._queue_name
            )
        except QueueConnectionError as e:
            logger.warning(f"Redrive policy of {self._queue_name} unknown: {e}")
            return
        if self._max_receive_count is None:
            logger.warning(
                f"Queue {self._queue_name} has no dead-letter queue; failed notifications "
                f"are redelivered until they expire"
            )

    async def _release(self, client: Any, queue_url: str, receipt: str, attempt: int) -> None:
        await client.change_message_visibility(
            QueueUrl=queue_url,
            ReceiptHandle=receipt,
            VisibilityTimeout=self._retry_policy.visibility_timeout(attempt),
        )

    async def _bounded(self, client: Any, queue_url: str, msg: dict[str, Any]) -> None:
        async with self._semaphore:
            await self.process_message(client, queue_url, msg)

    async def poll_once(self) -> int:
        """Receive and process one batch; return the number of messages seen."""
        await self._load_redrive_limit()
        client = await self._connection.get_client()
        queue_url = await self._connection.get_queue_url(self._queue_name)
        out = await client.receive_message(
            QueueUrl=queue_url,
            MaxNumberOfMessages=self._max_messages,
            WaitTimeSeconds=self._wait_time_seconds,
            VisibilityTimeout=self._visibility_timeout,
            AttributeNames=["ApproximateReceiveCount"],
        )
        messages = out.get("Messages", [])
        await asyncio.gather(*(self._bounded(client, queue_url, m) for m in messages))
        return len(messages)

    async def run(self) -> None:
        """Poll until stop() is called."""
        self._running = True
        logger.info(f"Starting notification consumer for queue {self._queue_name}")
        while self._running:
            try:
                await self.poll_once()
            except Exception:  # noqa: BLE001
                logger.error("Error receiving from SQS", exc_info=True)
                await asyncio.sleep(1)
        logger.info(f"Notification consumer for queue {self._queue_name} stopped")

    async def stop(self) -> None:
        """Stop the consumer loop after the current batch."""
        self._running = False

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check(self._queue_name)
