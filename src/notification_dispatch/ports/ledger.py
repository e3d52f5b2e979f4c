"""Delivery ledger port."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class IDeliveryLedger(Protocol):
    """
    Write-only status bookkeeping keyed by notification id.

    Every write is idempotent at the storage layer. A missing row is a
    logged warning, never an exception.
    """

    async def mark_delivered(self, notification_id: str, delivered_at: datetime) -> None:
        """Record a successful delivery."""
        ...

    async def mark_failed(self, notification_id: str, retry_count: int) -> None:
        """Record a terminal failure with the final retry count."""
        ...

    async def update_retry_count(self, notification_id: str, retry_count: int) -> None:
        """Record a retryable failure with the next retry count."""
        ...
