"""Log-context sanitization for notification requests."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .request import NotificationRequest

_DEFAULT_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passphrase",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "api_key",
        "otp",
        "code",
        "verification_code",
        "pin",
        "card_number",
        "cvv",
        "ssn",
    }
)


class ContextSanitizer:
    """
    Builds the diagnostic context logged for a notification request.

    Payload values under sensitive keys are replaced with ``***``; keys listed
    in ``hash_keys`` are replaced with a SHA-256 digest so they stay
    correlatable across log lines. The recipient is masked unless
    ``mask_recipient`` is False.
    """

    def __init__(
        self,
        *,
        sensitive_keys: set[str] | None = None,
        hash_keys: set[str] | None = None,
        mask_recipient: bool = True,
    ) -> None:
        keys = sensitive_keys if sensitive_keys is not None else _DEFAULT_SENSITIVE_KEYS
        self._sensitive_keys = {k.lower() for k in keys}
        self._hash_keys = {k.lower() for k in (hash_keys or set())}
        self._mask_recipient = mask_recipient

    def payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a sanitized copy of a flat payload."""
        result: dict[str, Any] = {}
        for key, value in payload.items():
            key_norm = str(key).lower()
            if key_norm in self._hash_keys:
                result[key] = _hash_value(value)
            elif key_norm in self._sensitive_keys:
                result[key] = "***"
            else:
                result[key] = value
        return result

    def recipient(self, recipient: str) -> str:
        """Mask a recipient: ``a***@example.com`` / ``***7890``."""
        if not self._mask_recipient or not recipient:
            return recipient
        if "@" in recipient:
            local, _, domain = recipient.partition("@")
            return f"{local[:1]}***@{domain}"
        return f"***{recipient[-4:]}" if len(recipient) > 4 else "***"

    def context(self, request: NotificationRequest) -> dict[str, Any]:
        """Diagnostic context for log lines about *request*."""
        return {
            "id": request.id,
            "template": request.template_name,
            "channel": request.channel,
            "recipient": self.recipient(request.recipient),
            "retry_count": request.retry_count,
            "requested_at": (
                request.requested_at.isoformat() if request.requested_at else None
            ),
            "payload_keys": sorted(request.payload),
            "payload": self.payload(request.payload),
        }


def _hash_value(value: Any) -> str:
    digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


default_sanitizer = ContextSanitizer()
