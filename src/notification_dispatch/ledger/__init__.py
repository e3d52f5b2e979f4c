"""Delivery ledger persistence."""

from __future__ import annotations

from .models import Base, NotificationRecord
from .sql import SQLAlchemyDeliveryLedger

__all__ = ["Base", "NotificationRecord", "SQLAlchemyDeliveryLedger"]
