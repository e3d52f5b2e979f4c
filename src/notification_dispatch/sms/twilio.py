"""Twilio SMS implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from ..exceptions import NotificationConfigurationError
from ..ports.sender import ISmsSender
from ..sanitization import default_sanitizer

logger = logging.getLogger(__name__)

_FAILED_STATUSES = frozenset({"failed", "undelivered"})


class TwilioSmsSender(ISmsSender):
    """
    Twilio SMS sender.

    The Twilio SDK is synchronous, so each call runs in a worker thread and
    is bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        timeout: float = 30.0,
        client: Any | None = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self._validate()
        self._client = client or TwilioClient(
            account_sid,
            auth_token,
            http_client=TwilioHttpClient(timeout=timeout),
        )

    def _validate(self) -> None:
        if not self.account_sid:
            raise NotificationConfigurationError("Twilio account_sid cannot be empty")
        if not self.auth_token:
            raise NotificationConfigurationError("Twilio auth_token cannot be empty")
        if not self.from_number:
            raise NotificationConfigurationError("Twilio from_number cannot be empty")

    async def send(self, recipient: str, text_body: str) -> bool:
        if not recipient:
            logger.error("Recipient phone number cannot be empty")
            return False

        if not text_body:
            logger.error("SMS message cannot be empty")
            return False

        masked = default_sanitizer.recipient(recipient)
        try:
            logger.info(f"Sending SMS to {masked}")
            message = await asyncio.wait_for(
                asyncio.to_thread(
                    self._client.messages.create,
                    to=recipient,
                    from_=self.from_number,
                    body=text_body,
                ),
                timeout=self.timeout,
            )

            status = str(message.status or "").lower()
            if status in _FAILED_STATUSES:
                logger.error(
                    f"SMS failed to send to {masked}. "
                    f"Status: {status}, ErrorCode: {message.error_code}"
                )
                return False

            logger.info(
                f"SMS sent successfully to {masked}. SID: {message.sid}, Status: {status}"
            )
            return True

        except TwilioRestException as e:
            logger.error(f"Twilio API error sending SMS to {masked}: {e.msg} (code {e.code})")
            return False
        except TwilioException as e:
            logger.error(f"Twilio error sending SMS to {masked}: {e}")
            return False
        except asyncio.TimeoutError:
            logger.error(f"Timed out after {self.timeout}s sending SMS to {masked}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending SMS to {masked}: {e}", exc_info=True)
            return False
