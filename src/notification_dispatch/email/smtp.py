"""SMTP email implementation."""

from __future__ import annotations

import asyncio
import email.message
import email.policy
import email.utils
import logging

import aiosmtplib

from ..exceptions import NotificationConfigurationError
from ..ports.sender import IEmailSender
from ..sanitization import default_sanitizer

logger = logging.getLogger(__name__)


class SmtpEmailSender(IEmailSender):
    """
    Async SMTP email sender using aiosmtplib.

    Configuration is validated at construction; a missing host, credential or
    sender address raises NotificationConfigurationError. Per-call failures
    are logged and reported as ``False``.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        from_email: str,
        *,
        port: int = 587,
        from_name: str | None = None,
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout
        self._validate()

    def _validate(self) -> None:
        if not self.host:
            raise NotificationConfigurationError("SMTP host cannot be empty")
        if not self.username:
            raise NotificationConfigurationError("SMTP username cannot be empty")
        if not self.password:
            raise NotificationConfigurationError("SMTP password cannot be empty")
        if not self.from_email:
            raise NotificationConfigurationError("SMTP from_email cannot be empty")

    def build_message(
        self, recipient: str, subject: str, html_body: str
    ) -> email.message.EmailMessage:
        """Build the MIME message for one delivery."""
        message = email.message.EmailMessage(policy=email.policy.default)
        message["To"] = recipient
        message["From"] = (
            email.utils.formataddr((self.from_name, self.from_email))
            if self.from_name
            else self.from_email
        )
        message["Subject"] = subject
        message.set_content(html_body, subtype="html", charset="utf-8")
        return message

    async def send(self, recipient: str, subject: str, html_body: str) -> bool:
        if not recipient:
            logger.error("Recipient email address cannot be empty")
            return False

        if not subject:
            logger.warning("Email subject is empty")

        masked = default_sanitizer.recipient(recipient)
        try:
            message = self.build_message(recipient, subject, html_body)

            logger.info(f"Sending email to {masked} with subject: {subject}")
            async with aiosmtplib.SMTP(
                hostname=self.host,
                port=self.port,
                timeout=self.timeout,
                start_tls=False,
            ) as smtp:
                if self.use_tls:
                    await smtp.starttls()
                await smtp.login(self.username, self.password)
                await smtp.send_message(message)

            logger.info(f"Email sent successfully to {masked}")
            return True

        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP error sending email to {masked}: {e}")
            return False
        except (OSError, asyncio.TimeoutError) as e:
            logger.error(f"Connection error sending email to {masked}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending email to {masked}: {e}", exc_info=True)
            return False
