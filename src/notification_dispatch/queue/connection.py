"""Shared SQS client for the notification queue."""

from __future__ import annotations

import json
import logging
from typing import Any

from aiobotocore.session import AioSession

from ..exceptions import QueueConnectionError

logger = logging.getLogger(__name__)


class SQSConnectionManager:
    """
    Owns one aiobotocore SQS client and the notification queue's metadata.

    Queues are provisioned outside the worker (together with their redrive
    policy), so a missing queue is a QueueConnectionError rather than
    something to create. Use as ``async with SQSConnectionManager(...) as conn``
    or call ``close()`` explicitly.
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        *,
        session: AioSession | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure region; ``client_kwargs`` go to ``create_client`` (e.g. endpoint_url)."""
        self._region = region_name
        self._session = session or AioSession()
        self._client_kwargs = client_kwargs
        self._client: Any = None
        self._client_cm: Any = None
        self._queue_urls: dict[str, str] = {}

    async def __aenter__(self) -> SQSConnectionManager:
        await self.get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_client(self) -> Any:
        if self._client is None:
            self._client_cm = self._session.create_client(
                "sqs", region_name=self._region, **self._client_kwargs
            )
            self._client = await self._client_cm.__aenter__()
        return self._client

    async def get_queue_url(self, queue_name: str) -> str:
        """Resolve and cache the URL of an existing queue."""
        cached = self._queue_urls.get(queue_name)
        if cached is not None:
            return cached
        client = await self.get_client()
        try:
            out = await client.get_queue_url(QueueName=queue_name)
        except Exception as e:
            raise QueueConnectionError(f"Cannot resolve queue {queue_name}: {e}") from e
        url = self._queue_urls[queue_name] = str(out["QueueUrl"])
        return url

    async def redrive_max_receive_count(self, queue_name: str) -> int | None:
        """
        ``maxReceiveCount`` of the queue's redrive policy.

        None when the queue has no dead-letter queue attached, in which case
        failed notifications are redelivered until the message expires.
        """
        queue_url = await self.get_queue_url(queue_name)
        client = await self.get_client()
        try:
            out = await client.get_queue_attributes(
                QueueUrl=queue_url, AttributeNames=["RedrivePolicy"]
            )
        except Exception as e:
            raise QueueConnectionError(f"Cannot read attributes of {queue_name}: {e}") from e

        policy = (out.get("Attributes") or {}).get("RedrivePolicy")
        if not policy:
            return None
        try:
            return int(json.loads(policy)["maxReceiveCount"])
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Unreadable RedrivePolicy on queue {queue_name}: {policy}")
            return None

    async def close(self) -> None:
        if self._client_cm is not None:
            await self._client_cm.__aexit__(None, None, None)
            self._client_cm = None
            self._client = None

    async def health_check(self, queue_name: str | None = None) -> bool:
        """True if SQS answers; with *queue_name*, if that queue is reachable."""
        try:
            client = await self.get_client()
            if queue_name is None:
                await client.list_queues(MaxResults=1)
            else:
                await client.get_queue_attributes(
                    QueueUrl=await self.get_queue_url(queue_name),
                    AttributeNames=["ApproximateNumberOfMessages"],
                )
            return True
        except Exception:  # noqa: BLE001
            logger.warning("SQS health check failed", exc_info=True)
            return False
