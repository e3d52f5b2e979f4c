"""RequestSerializer — JSON roundtrip for queue message bodies."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .exceptions import MalformedMessageError
from .request import NotificationRequest


class RequestSerializer:
    """Serialize/deserialize NotificationRequest to/from the wire JSON."""

    def serialize(self, request: NotificationRequest) -> bytes:
        """Encode request to camelCase JSON bytes."""
        data = request.model_dump(mode="json", by_alias=True)
        return json.dumps(data, separators=(",", ":")).encode("utf-8")

    def deserialize(self, raw: bytes | str) -> NotificationRequest:
        """Decode a message body; raise MalformedMessageError on any failure."""
        try:
            text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
            data = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as e:
            raise MalformedMessageError(f"Invalid JSON message body: {e}") from e
        return self.from_dict(data)

    def from_dict(self, data: Any) -> NotificationRequest:
        """Validate an already-decoded message body."""
        if not isinstance(data, dict):
            raise MalformedMessageError(
                f"Message body must be a JSON object, got {type(data).__name__}"
            )
        try:
            return NotificationRequest.model_validate(data)
        except ValidationError as e:
            raise MalformedMessageError(str(e)) from e
