"""In-memory delivery ledger for tests and local runs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from ..delivery import DeliveryStatus
from ..exceptions import InvalidArgumentError
from ..ports.ledger import IDeliveryLedger

logger = logging.getLogger(__name__)

# Statuses a write must not overwrite, keyed by the status being written.
_PROTECTED_FROM: dict[DeliveryStatus, tuple[DeliveryStatus, ...]] = {
    DeliveryStatus.FAILED: (DeliveryStatus.DELIVERED, DeliveryStatus.FAILED),
    DeliveryStatus.RETRYING: (DeliveryStatus.DELIVERED, DeliveryStatus.FAILED),
}


@dataclass
class LedgerEntry:
    """Current status of one notification."""

    status: DeliveryStatus = DeliveryStatus.PENDING
    retry_count: int = 0
    delivered_at: datetime | None = None


@dataclass(frozen=True)
class LedgerCall:
    """One write received by the ledger, in arrival order."""

    operation: str
    notification_id: str
    retry_count: int | None = None
    delivered_at: datetime | None = None


class InMemoryDeliveryLedger(IDeliveryLedger):
    """
    Ledger that keeps rows in a dict.

    Rows must be seeded with ``register()``; writes for unknown ids are
    logged as warnings and otherwise ignored, mirroring an UPDATE that
    matches no row. Every write is recorded in ``calls``.
    """

    def __init__(self, *, auto_register: bool = False) -> None:
        self._entries: dict[str, LedgerEntry] = {}
        self._lock = asyncio.Lock()
        self._auto_register = auto_register
        self.calls: list[LedgerCall] = []

    def register(self, notification_id: str, retry_count: int = 0) -> None:
        """Seed a pending row."""
        self._entries[notification_id] = LedgerEntry(retry_count=retry_count)

    def get(self, notification_id: str) -> LedgerEntry | None:
        return self._entries.get(notification_id)

    def calls_for(self, operation: str) -> list[LedgerCall]:
        return [c for c in self.calls if c.operation == operation]

    async def mark_delivered(self, notification_id: str, delivered_at: datetime) -> None:
        await self._write(
            LedgerCall("mark_delivered", notification_id, delivered_at=delivered_at),
            status=DeliveryStatus.DELIVERED,
        )

    async def mark_failed(self, notification_id: str, retry_count: int) -> None:
        await self._write(
            LedgerCall("mark_failed", notification_id, retry_count=retry_count),
            status=DeliveryStatus.FAILED,
        )

    async def update_retry_count(self, notification_id: str, retry_count: int) -> None:
        await self._write(
            LedgerCall("update_retry_count", notification_id, retry_count=retry_count),
            status=DeliveryStatus.RETRYING,
        )

    async def _write(self, call: LedgerCall, *, status: DeliveryStatus) -> None:
        if not call.notification_id:
            raise InvalidArgumentError("Notification ID cannot be empty")

        async with self._lock:
            self.calls.append(call)
            entry = self._entries.get(call.notification_id)
            if entry is None:
                if not self._auto_register:
                    logger.warning(f"No notification found with ID: {call.notification_id}")
                    return
                entry = self._entries[call.notification_id] = LedgerEntry()

            if entry.status in _PROTECTED_FROM.get(status, ()):
                logger.info(
                    f"Notification {call.notification_id} already {entry.status.value}; "
                    f"status update skipped"
                )
                return

            entry.status = status
            if call.retry_count is not None:
                entry.retry_count = call.retry_count
            if call.delivered_at is not None:
                entry.delivered_at = call.delivered_at
            logger.info(
                f"Notification {call.notification_id} -> {status.value} "
                f"(retry count {entry.retry_count})"
            )
