"""Tests for log-context sanitization."""

from notification_dispatch.request import NotificationRequest
from notification_dispatch.sanitization import ContextSanitizer, default_sanitizer


def test_default_sanitizer_redacts_sensitive_keys():
    result = default_sanitizer.payload(
        {"firstName": "Ann", "password": "hunter2", "OTP": "123456", "api_key": "k"}
    )

    assert result == {"firstName": "Ann", "password": "***", "OTP": "***", "api_key": "***"}


def test_hash_keys():
    sanitizer = ContextSanitizer(hash_keys={"user_id"})

    result = sanitizer.payload({"user_id": "u-1", "name": "Ann"})

    assert result["user_id"].startswith("sha256:")
    assert result["user_id"] == sanitizer.payload({"user_id": "u-1"})["user_id"]
    assert result["name"] == "Ann"


def test_custom_sensitive_keys_replace_defaults():
    sanitizer = ContextSanitizer(sensitive_keys={"firstName"})

    assert sanitizer.payload({"firstName": "Ann", "password": "p"}) == {
        "firstName": "***",
        "password": "p",
    }


def test_recipient_masking():
    assert default_sanitizer.recipient("ann@example.com") == "a***@example.com"
    assert default_sanitizer.recipient("+15551234567") == "***4567"
    assert default_sanitizer.recipient("123") == "***"
    assert default_sanitizer.recipient("") == ""
    assert ContextSanitizer(mask_recipient=False).recipient("a@b.com") == "a@b.com"


def test_context():
    request = NotificationRequest.model_validate(
        {
            "id": "n-1",
            "template": "welcome",
            "channel": "email",
            "retryCount": 1,
            "recipient": "a@b.com",
            "payload": {"token": "t", "firstName": "Ann"},
        }
    )

    context = default_sanitizer.context(request)

    assert context["id"] == "n-1"
    assert context["template"] == "welcome"
    assert context["recipient"] == "a***@b.com"
    assert context["retry_count"] == 1
    assert context["requested_at"] is None
    assert context["payload_keys"] == ["firstName", "token"]
    assert context["payload"]["token"] == "***"
