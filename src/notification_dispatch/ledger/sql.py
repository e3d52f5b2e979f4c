"""
SQLAlchemy implementation of the delivery ledger.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..delivery import DeliveryStatus
from ..exceptions import InvalidArgumentError, LedgerError
from ..ports.ledger import IDeliveryLedger
from ..request import NotificationRequest
from .models import NotificationRecord

logger = logging.getLogger(__name__)

_TERMINAL = (DeliveryStatus.DELIVERED.value, DeliveryStatus.FAILED.value)


class SQLAlchemyDeliveryLedger(IDeliveryLedger):
    """
    Delivery ledger backed by the ``notifications`` table.

    Each write is a single UPDATE in its own transaction, so concurrent
    writers for different ids never contend beyond row level. Rows are
    created upstream (or via ``create``); an UPDATE that matches nothing is
    logged as a warning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def mark_delivered(self, notification_id: str, delivered_at: datetime) -> None:
        """
        Mark a notification as delivered at *delivered_at*.
        """
        rows = await self._update(
            notification_id,
            {"status": DeliveryStatus.DELIVERED.value, "delivered_at": delivered_at},
        )
        if rows:
            logger.info(f"Marked notification {notification_id} as delivered")

    async def mark_failed(self, notification_id: str, retry_count: int) -> None:
        """
        Mark a notification as terminally failed.

        Only the first terminal write counts: delivered and failed rows keep
        their status and retry count.
        """
        rows = await self._update(
            notification_id,
            {"status": DeliveryStatus.FAILED.value, "retry_count": retry_count},
            unless_status=_TERMINAL,
        )
        if rows:
            logger.info(
                f"Marked notification {notification_id} as failed with retry count {retry_count}"
            )

    async def update_retry_count(self, notification_id: str, retry_count: int) -> None:
        """
        Record a retryable failure. Rows already in a terminal state are left as is.
        """
        rows = await self._update(
            notification_id,
            {"status": DeliveryStatus.RETRYING.value, "retry_count": retry_count},
            unless_status=_TERMINAL,
        )
        if rows:
            logger.info(
                f"Updated retry count for notification {notification_id} to {retry_count}"
            )

    async def create(self, request: NotificationRequest) -> None:
        """Insert a pending row for *request*."""
        record = NotificationRecord(
            id=request.id,
            template=request.template_name,
            channel=request.channel,
            recipient=request.recipient,
            status=DeliveryStatus.PENDING.value,
            retry_count=request.retry_count,
            payload=dict(request.payload),
        )
        if request.requested_at is not None:
            record.requested_at = request.requested_at
        try:
            async with self._session_factory() as session, session.begin():
                session.add(record)
        except SQLAlchemyError as e:
            logger.error(f"Error creating notification {request.id}: {e}")
            raise LedgerError(f"Could not create notification {request.id}") from e

    async def get_status(self, notification_id: str) -> NotificationRecord | None:
        """Current row for reporting; None when the id is unknown."""
        try:
            async with self._session_factory() as session:
                return await session.get(NotificationRecord, notification_id)
        except SQLAlchemyError as e:
            raise LedgerError(f"Could not read notification {notification_id}") from e

    async def _update(
        self,
        notification_id: str,
        values: dict[str, Any],
        *,
        unless_status: tuple[str, ...] = (),
    ) -> int:
        if not notification_id:
            raise InvalidArgumentError("Notification ID cannot be empty")

        stmt = (
            update(NotificationRecord)
            .where(NotificationRecord.id == notification_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if unless_status:
            stmt = stmt.where(NotificationRecord.status.not_in(unless_status))

        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                rows = result.rowcount or 0
                if rows == 0:
                    existing = await session.scalar(
                        select(NotificationRecord.status).where(
                            NotificationRecord.id == notification_id
                        )
                    )
                    if existing is None:
                        logger.warning(f"No notification found with ID: {notification_id}")
                    else:
                        logger.info(
                            f"Notification {notification_id} already {existing}; "
                            f"status update skipped"
                        )
                return rows
        except SQLAlchemyError as e:
            logger.error(f"Error updating notification {notification_id}: {e}")
            raise LedgerError(f"Could not update notification {notification_id}") from e
