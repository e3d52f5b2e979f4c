"""NotificationRequest — inbound queue message model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .template.renderer import to_text

PayloadValue = str | int | float | bool | None


class NotificationRequest(BaseModel):
    """Immutable notification request as received from the queue.

    Wire names follow the producer contract (``template``, ``retryCount``,
    ``requestedAt``); attribute names are snake_case.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Notification id, correlates with ledger rows")
    template_name: str = Field(default="", alias="template")
    channel: str = ""
    recipient: str = ""
    retry_count: int = Field(default=0, ge=0, alias="retryCount")
    payload: dict[str, PayloadValue] = Field(default_factory=dict)
    requested_at: datetime | None = Field(default=None, alias="requestedAt")

    @field_validator("template_name", "channel", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("channel")
    @classmethod
    def _normalize_channel(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("payload", mode="before")
    @classmethod
    def _default_payload(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def subject(self) -> str | None:
        """Email subject carried in the payload, if any."""
        return to_text(self.payload.get("subject")) or None

    def with_retry_count(self, retry_count: int) -> NotificationRequest:
        """Return a copy carrying a different retry count."""
        return self.model_copy(update={"retry_count": retry_count})
