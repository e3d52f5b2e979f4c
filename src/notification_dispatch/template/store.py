"""Filesystem template store."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from ..delivery import NotificationChannel
from ..exceptions import InvalidArgumentError, NotFoundKind, TemplateNotFoundError
from ..ports.template import ITemplateStore

logger = logging.getLogger(__name__)

# Template names are single path segments.
_UNSAFE_NAME = re.compile(r"[\\/\x00]")


class FileSystemTemplateStore(ITemplateStore):
    """
    Loads templates from a directory per channel.

    Directory structure: ``{base_dir}/{channel}/{template_name}{ext}`` where
    ``ext`` is ``.html`` for email and ``.txt`` for sms and inapp.
    Channel matching is case-insensitive; template names are not.
    """

    def __init__(self, base_dir: str | Path, *, cache: bool = False):
        self.base_dir = Path(base_dir)
        self._cache_enabled = cache
        self._cache: dict[tuple[str, NotificationChannel], str] = {}
        if not self.base_dir.is_dir():
            logger.warning(f"Template base directory does not exist: {self.base_dir}")

    async def load(self, template_name: str, channel: str) -> str:
        if not template_name:
            raise InvalidArgumentError("Template name cannot be empty")
        if not channel:
            raise InvalidArgumentError("Channel cannot be empty")
        if _UNSAFE_NAME.search(template_name) or template_name in {".", ".."}:
            raise InvalidArgumentError(f"Invalid template name: {template_name!r}")

        resolved = NotificationChannel.parse(channel)
        key = (template_name, resolved)
        if self._cache_enabled and key in self._cache:
            return self._cache[key]

        content = await asyncio.to_thread(self._read, template_name, resolved)
        if self._cache_enabled:
            self._cache[key] = content
        return content

    def template_path(self, template_name: str, channel: NotificationChannel) -> Path:
        """Resolved path of a template file."""
        return self.base_dir / channel.value / f"{template_name}{channel.template_extension}"

    def _read(self, template_name: str, channel: NotificationChannel) -> str:
        channel_dir = self.base_dir / channel.value
        if not channel_dir.is_dir():
            raise TemplateNotFoundError(
                NotFoundKind.CHANNEL_DIRECTORY, template_name, channel.value, str(channel_dir)
            )

        path = self.template_path(template_name, channel)
        # Compare against the listing so case-folding filesystems cannot
        # satisfy a template name that differs only in case.
        if not path.is_file() or path.name not in {p.name for p in channel_dir.iterdir()}:
            raise TemplateNotFoundError(
                NotFoundKind.TEMPLATE_FILE, template_name, channel.value, str(path)
            )

        logger.info(f"Loading template from: {path}")
        return path.read_text(encoding="utf-8")

    def clear_cache(self) -> None:
        """Drop cached template text."""
        self._cache.clear()
