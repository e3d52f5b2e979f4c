"""In-memory template store for simple use cases."""

from __future__ import annotations

from ..delivery import NotificationChannel
from ..exceptions import InvalidArgumentError, NotFoundKind, TemplateNotFoundError
from ..ports.template import ITemplateStore


class InMemoryTemplateStore(ITemplateStore):
    """Template store backed by a dict, with the filesystem store's error contract."""

    def __init__(self) -> None:
        self._templates: dict[tuple[str, NotificationChannel], str] = {}
        self.loads: list[tuple[str, str]] = []

    def add(self, template_name: str, channel: str | NotificationChannel, body: str) -> None:
        """Register a template body."""
        if not isinstance(channel, NotificationChannel):
            channel = NotificationChannel.parse(channel)
        self._templates[(template_name, channel)] = body

    async def load(self, template_name: str, channel: str) -> str:
        self.loads.append((template_name, channel))
        if not template_name:
            raise InvalidArgumentError("Template name cannot be empty")
        if "/" in template_name or "\\" in template_name:
            raise InvalidArgumentError(f"Invalid template name: {template_name!r}")
        resolved = NotificationChannel.parse(channel)
        if not any(ch is resolved for _, ch in self._templates):
            raise TemplateNotFoundError(
                NotFoundKind.CHANNEL_DIRECTORY, template_name, resolved.value, resolved.value
            )
        try:
            return self._templates[(template_name, resolved)]
        except KeyError:
            raise TemplateNotFoundError(
                NotFoundKind.TEMPLATE_FILE,
                template_name,
                resolved.value,
                f"{resolved.value}/{template_name}{resolved.template_extension}",
            ) from None
