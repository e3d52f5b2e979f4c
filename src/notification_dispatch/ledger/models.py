from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON, TypeDecorator

from ..delivery import DeliveryStatus


class JSONType(TypeDecorator[dict[str, Any]]):
    """
    Dialect-agnostic JSON type.
    Uses JSONB on PostgreSQL and standard JSON on other dialects (like SQLite).
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Any) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Declarative base for ledger tables."""


class NotificationRecord(Base):
    """
    Row tracking one notification's delivery status.
    Status values are the lowercase strings of DeliveryStatus.
    """

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    template: Mapped[str] = mapped_column(String)
    channel: Mapped[str] = mapped_column(String(16))
    recipient: Mapped[str] = mapped_column(String)
    status: Mapped[str] = mapped_column(String(16), default=DeliveryStatus.PENDING.value)
    retry_count: Mapped[int] = mapped_column(Integer, default=0)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=True)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_notifications_status", "status"),
        Index("idx_notifications_requested_at", "requested_at"),
        Index("idx_notifications_delivered_at", "delivered_at"),
    )
