"""Tests for NotificationQueueWorker."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from notification_dispatch.delivery import DeliveryStatus
from notification_dispatch.exceptions import NotificationDeliveryFailed
from notification_dispatch.serialization import RequestSerializer
from notification_dispatch.worker import NotificationQueueWorker


def _body(**overrides: object) -> bytes:
    data: dict[str, object] = {
        "id": "n-1",
        "template": "welcome",
        "channel": "email",
        "retryCount": 0,
        "recipient": "a@b.com",
        "payload": {"firstName": "Ann"},
        "requestedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return json.dumps(data).encode("utf-8")


@pytest.fixture
def mock_processor() -> MagicMock:
    processor = MagicMock()
    processor.process = AsyncMock(return_value=True)
    return processor


@pytest.fixture
def worker(mock_processor: MagicMock) -> NotificationQueueWorker:
    return NotificationQueueWorker(mock_processor)


@pytest.mark.asyncio
async def test_handle_success_returns_normally(worker, mock_processor):
    await worker.handle(_body(), message_id="m-1", delivery_count=1)

    request = mock_processor.process.await_args.args[0]
    assert request.id == "n-1"
    assert request.template_name == "welcome"
    assert request.payload == {"firstName": "Ann"}


@pytest.mark.asyncio
async def test_handle_failure_raises_for_redelivery(worker, mock_processor):
    mock_processor.process.return_value = False

    with pytest.raises(NotificationDeliveryFailed) as exc_info:
        await worker.handle(_body(retryCount=2))

    assert exc_info.value.notification_id == "n-1"
    assert exc_info.value.retry_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[1, 2, 3]",
        b"\xff\xfe",
        _body(retryCount=-1),
        json.dumps({"template": "welcome", "channel": "email"}).encode(),
    ],
)
async def test_malformed_message_is_consumed(worker, mock_processor, body, caplog):
    await worker.handle(body, message_id="m-bad")

    mock_processor.process.assert_not_awaited()
    assert "Failed to deserialize notification message. MessageId: m-bad" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["template", "channel"])
@pytest.mark.parametrize("as_null", [False, True])
async def test_missing_template_or_channel_is_recorded_as_failed(
    processor, ledger, notification_id, field, as_null
):
    data = json.loads(_body(id=notification_id))
    if as_null:
        data[field] = None
    else:
        del data[field]

    with pytest.raises(NotificationDeliveryFailed):
        await NotificationQueueWorker(processor).handle(json.dumps(data), message_id="m-4")

    assert [(c.operation, c.retry_count) for c in ledger.calls] == [("mark_failed", 0)]
    assert ledger.get(notification_id).status is DeliveryStatus.FAILED


@pytest.mark.asyncio
async def test_delivery_count_raises_retry_count(worker, mock_processor):
    await worker.handle(_body(retryCount=0), delivery_count=4)

    assert mock_processor.process.await_args.args[0].retry_count == 3


@pytest.mark.asyncio
async def test_delivery_count_never_lowers_retry_count(worker, mock_processor):
    await worker.handle(_body(retryCount=3), delivery_count=1)

    assert mock_processor.process.await_args.args[0].retry_count == 3


@pytest.mark.asyncio
async def test_handle_accepts_str_body(worker, mock_processor):
    await worker.handle(_body().decode("utf-8"))

    mock_processor.process.assert_awaited_once()


@pytest.mark.asyncio
async def test_handle_payload(worker, mock_processor):
    await worker.handle_payload(json.loads(_body(channel="SMS")), message_id="m-2")

    assert mock_processor.process.await_args.args[0].channel == "sms"


@pytest.mark.asyncio
async def test_handle_payload_invalid(worker, mock_processor, caplog):
    await worker.handle_payload({"template": "welcome", "channel": "email"}, message_id="m-3")

    mock_processor.process.assert_not_awaited()
    assert "Invalid notification payload. MessageId: m-3" in caplog.text


@pytest.mark.asyncio
async def test_custom_serializer_is_used(mock_processor):
    serializer = MagicMock(spec=RequestSerializer)
    serializer.deserialize.return_value = RequestSerializer().deserialize(_body())
    worker = NotificationQueueWorker(mock_processor, serializer=serializer)

    await worker.handle(b"anything")

    serializer.deserialize.assert_called_once_with(b"anything")
