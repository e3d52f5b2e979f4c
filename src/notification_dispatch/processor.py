"""Notification processor: template resolution, channel dispatch and ledger bookkeeping."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from .correlation import correlation_scope
from .delivery import DeliveryOutcome, DeliveryStatus, NotificationChannel
from .exceptions import InvalidArgumentError, NotFoundKind, TemplateNotFoundError
from .ports.ledger import IDeliveryLedger
from .ports.sender import IEmailSender, ISmsSender
from .ports.template import ITemplateRenderer, ITemplateStore
from .request import NotificationRequest
from .sanitization import ContextSanitizer, default_sanitizer

logger = logging.getLogger(__name__)

MAX_RETRIES = 5
DEFAULT_SUBJECT = "Notification"


class NotificationProcessor:
    """
    Runs one delivery attempt for a notification request.

    Each call to ``process`` ends in exactly one ledger write (except for an
    unusable request with no id) and a boolean; no exception escapes. The
    retry loop itself lives outside: the queue redelivers the message and
    ``retry_count`` carries the attempt number.

    Failure classification:

    * template missing, bad channel, retries exhausted: terminal,
      ``mark_failed`` with the unchanged retry count;
    * transport returned False, in-app channel, unexpected exception:
      retryable, ``update_retry_count`` with ``retry_count + 1``.

    The processor keeps no per-call state, so one instance may serve many
    concurrent messages.
    """

    def __init__(
        self,
        template_store: ITemplateStore,
        renderer: ITemplateRenderer,
        email_sender: IEmailSender,
        sms_sender: ISmsSender,
        ledger: IDeliveryLedger,
        *,
        max_retries: int = MAX_RETRIES,
        default_subject: str = DEFAULT_SUBJECT,
        sanitizer: ContextSanitizer | None = None,
    ):
        collaborators = {
            "template_store": template_store,
            "renderer": renderer,
            "email_sender": email_sender,
            "sms_sender": sms_sender,
            "ledger": ledger,
        }
        for name, value in collaborators.items():
            if value is None:
                raise ValueError(f"{name} is required")
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")

        self.template_store = template_store
        self.renderer = renderer
        self.email_sender = email_sender
        self.sms_sender = sms_sender
        self.ledger = ledger
        self.max_retries = max_retries
        self.default_subject = default_subject
        self.sanitizer = sanitizer or default_sanitizer

    async def process(self, request: NotificationRequest | None) -> bool:
        """
        Process one notification request.

        Returns True only when the notification was sent and recorded as
        delivered.
        """
        if request is None:
            logger.error("Notification request cannot be None")
            return False
        if not request.id:
            logger.error("Notification request has no id; nothing to record against")
            return False

        with correlation_scope(request.id):
            return await self._process(request)

    async def _process(self, request: NotificationRequest) -> bool:
        context = self.sanitizer.context(request)
        logger.info(
            f"Processing notification {request.id} - Template: {request.template_name}, "
            f"Channel: {request.channel}, Retry: {request.retry_count}, Context: {context}"
        )

        try:
            outcome = await self._attempt(request, context)
            await self._record(request.id, outcome)
        except Exception as e:
            logger.error(
                f"Unexpected error processing notification {request.id}. "
                f"Template: {request.template_name}, Channel: {request.channel}, "
                f"RetryCount: {request.retry_count}, Exception Type: {type(e).__name__}, "
                f"Context: {context}",
                exc_info=True,
            )
            await self._record_fallback(request)
            return False

        if outcome.succeeded:
            logger.info(f"Notification {request.id} processed successfully")
        elif outcome.status is DeliveryStatus.RETRYING:
            logger.warning(
                f"Notification {request.id} failed to send. Retry count: {outcome.retry_count}"
            )
        return outcome.succeeded

    async def _attempt(
        self, request: NotificationRequest, context: dict[str, Any]
    ) -> DeliveryOutcome:
        if request.retry_count >= self.max_retries:
            logger.error(
                f"Notification {request.id} exceeded max retries ({self.max_retries}). "
                f"Moving to failed status."
            )
            return DeliveryOutcome.failed_terminal(request.retry_count)

        try:
            template = await self.template_store.load(request.template_name, request.channel)
        except TemplateNotFoundError as e:
            if e.kind is NotFoundKind.CHANNEL_DIRECTORY:
                logger.error(
                    f"Channel directory {request.channel} not found. Notification "
                    f"{request.id} will be marked as failed. Context: {context}"
                )
            else:
                logger.error(
                    f"Template {request.template_name} not found for channel {request.channel}. "
                    f"Notification {request.id} will be marked as failed. Context: {context}"
                )
            return DeliveryOutcome.failed_terminal(request.retry_count)
        except InvalidArgumentError as e:
            logger.error(
                f"Invalid argument for notification {request.id}: {e}. "
                f"Template: {request.template_name}, Channel: {request.channel}. Context: {context}"
            )
            return DeliveryOutcome.failed_terminal(request.retry_count)

        content = self.renderer.render(template, request.payload)

        sent = await self._dispatch(request, content, context)
        if sent is None:
            return DeliveryOutcome.failed_terminal(request.retry_count)
        if sent:
            return DeliveryOutcome.delivered(datetime.now(timezone.utc), request.retry_count)
        return DeliveryOutcome.failed_retryable(request.retry_count + 1)

    async def _dispatch(
        self, request: NotificationRequest, content: str, context: dict[str, Any]
    ) -> bool | None:
        """Send via the request's channel; None means the channel is unknown."""
        try:
            channel = NotificationChannel.parse(request.channel)
        except InvalidArgumentError:
            logger.error(
                f"Unknown channel {request.channel} for notification {request.id}. "
                f"Context: {context}"
            )
            return None

        if channel is NotificationChannel.EMAIL:
            subject = request.subject or self.default_subject
            return await self.email_sender.send(request.recipient, subject, content)

        if channel is NotificationChannel.SMS:
            return await self.sms_sender.send(request.recipient, content)

        logger.warning(f"In-app notifications not yet implemented for notification {request.id}")
        return False

    async def _record(self, notification_id: str, outcome: DeliveryOutcome) -> None:
        if outcome.status is DeliveryStatus.DELIVERED:
            delivered_at = outcome.delivered_at or datetime.now(timezone.utc)
            await self.ledger.mark_delivered(notification_id, delivered_at)
        elif outcome.status is DeliveryStatus.FAILED:
            await self.ledger.mark_failed(notification_id, outcome.retry_count)
        else:
            await self.ledger.update_retry_count(notification_id, outcome.retry_count)

    async def _record_fallback(self, request: NotificationRequest) -> None:
        outcome = DeliveryOutcome.failed_retryable(request.retry_count + 1)
        try:
            await self._record(request.id, outcome)
        except Exception:
            logger.error(
                f"Could not record retry count {outcome.retry_count} for notification "
                f"{request.id}",
                exc_info=True,
            )
