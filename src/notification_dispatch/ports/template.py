"""Template store and renderer ports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ITemplateStore(Protocol):
    """
    Protocol for resolving (template name, channel) to raw template text.

    Implementations: FileSystemTemplateStore, InMemoryTemplateStore.
    """

    async def load(self, template_name: str, channel: str) -> str:
        """Return template text.

        Raises:
            InvalidArgumentError: empty name/channel or unsupported channel.
            TemplateNotFoundError: channel directory or template file missing.
        """
        ...


@runtime_checkable
class ITemplateRenderer(Protocol):
    """Protocol for substituting payload data into template text."""

    def render(self, template: str, data: Mapping[str, Any]) -> str:
        """Render template with data."""
        ...
