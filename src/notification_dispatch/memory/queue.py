"""In-memory notification queue with redelivery, for tests."""

from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..serialization import RequestSerializer

if TYPE_CHECKING:
    from ..request import NotificationRequest
    from ..worker import NotificationQueueWorker

logger = logging.getLogger(__name__)


@dataclass
class QueuedMessage:
    """A message body plus the broker's bookkeeping."""

    message_id: str
    body: bytes
    delivery_count: int = 0


class InMemoryNotificationQueue:
    """
    FIFO queue that mimics visibility-timeout redelivery.

    A message whose handler raises goes back to the tail with its delivery
    count incremented; once ``max_deliveries`` is reached it is moved to
    ``poisoned`` instead (the redrive policy of a real queue).
    """

    def __init__(
        self,
        *,
        max_deliveries: int = 10,
        serializer: RequestSerializer | None = None,
    ) -> None:
        if max_deliveries < 1:
            raise ValueError("max_deliveries must be >= 1")
        self._max_deliveries = max_deliveries
        self._serializer = serializer or RequestSerializer()
        self._pending: deque[QueuedMessage] = deque()
        self.acknowledged: list[QueuedMessage] = []
        self.poisoned: list[QueuedMessage] = []

    def __len__(self) -> int:
        return len(self._pending)

    def publish(self, request: NotificationRequest) -> str:
        """Enqueue a request; return the message id."""
        return self.publish_raw(self._serializer.serialize(request))

    def publish_raw(self, body: bytes | str) -> str:
        """Enqueue an arbitrary body (e.g. a malformed one)."""
        raw = body.encode("utf-8") if isinstance(body, str) else body
        message = QueuedMessage(message_id=str(uuid.uuid4()), body=raw)
        self._pending.append(message)
        return message.message_id

    async def deliver_next(self, worker: NotificationQueueWorker) -> bool:
        """Deliver the head message once. Returns False when the queue is empty."""
        if not self._pending:
            return False
        message = self._pending.popleft()
        message.delivery_count += 1
        try:
            await worker.handle(
                message.body,
                message_id=message.message_id,
                delivery_count=message.delivery_count,
            )
        except Exception as e:  # noqa: BLE001
            if message.delivery_count >= self._max_deliveries:
                logger.warning(f"Message {message.message_id} moved to poison list: {e}")
                self.poisoned.append(message)
            else:
                self._pending.append(message)
            return True

        self.acknowledged.append(message)
        return True

    async def drain(self, worker: NotificationQueueWorker) -> int:
        """Deliver until the queue is empty; return the number of deliveries."""
        deliveries = 0
        while await self.deliver_next(worker):
            deliveries += 1
        return deliveries
