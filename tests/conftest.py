"""Test configuration for notification-dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from notification_dispatch.memory import (
    InMemoryDeliveryLedger,
    InMemoryEmailSender,
    InMemorySmsSender,
)
from notification_dispatch.processor import NotificationProcessor
from notification_dispatch.request import NotificationRequest
from notification_dispatch.template.renderer import PlaceholderRenderer
from notification_dispatch.template.store import FileSystemTemplateStore

pytest_plugins = ["pytest_asyncio"]

NOTIFICATION_ID = "0b6f2c1e-8f4b-4a53-9a57-3f0f4f1d2c11"


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Template tree with one template per channel."""
    (tmp_path / "email").mkdir()
    (tmp_path / "sms").mkdir()
    (tmp_path / "inapp").mkdir()
    (tmp_path / "email" / "welcome.html").write_text("Hi {{firstName}}", encoding="utf-8")
    (tmp_path / "sms" / "otp.txt").write_text("Your code is {{code}}", encoding="utf-8")
    (tmp_path / "inapp" / "welcome.txt").write_text("Welcome {{firstName}}", encoding="utf-8")
    return tmp_path


@pytest.fixture
def template_store(template_dir: Path) -> FileSystemTemplateStore:
    return FileSystemTemplateStore(template_dir)


@pytest.fixture
def ledger() -> InMemoryDeliveryLedger:
    ledger = InMemoryDeliveryLedger()
    ledger.register(NOTIFICATION_ID)
    return ledger


@pytest.fixture
def email_sender() -> InMemoryEmailSender:
    return InMemoryEmailSender()


@pytest.fixture
def sms_sender() -> InMemorySmsSender:
    return InMemorySmsSender()


@pytest.fixture
def processor(
    template_store: FileSystemTemplateStore,
    email_sender: InMemoryEmailSender,
    sms_sender: InMemorySmsSender,
    ledger: InMemoryDeliveryLedger,
) -> NotificationProcessor:
    return NotificationProcessor(
        template_store=template_store,
        renderer=PlaceholderRenderer(),
        email_sender=email_sender,
        sms_sender=sms_sender,
        ledger=ledger,
    )


def _make_request(**overrides: object) -> NotificationRequest:
    """Welcome email for Ann unless overridden."""
    data: dict[str, object] = {
        "id": NOTIFICATION_ID,
        "template": "welcome",
        "channel": "email",
        "retryCount": 0,
        "recipient": "a@b.com",
        "payload": {"firstName": "Ann"},
    }
    data.update(overrides)
    return NotificationRequest.model_validate(data)


@pytest.fixture
def welcome_request() -> NotificationRequest:
    return _make_request()


@pytest.fixture
def request_factory():
    """Build requests from wire-format overrides."""
    return _make_request


@pytest.fixture
def notification_id() -> str:
    return NOTIFICATION_ID
