"""Template resolution and rendering."""

from __future__ import annotations

from .renderer import PlaceholderRenderer
from .store import FileSystemTemplateStore

__all__ = ["FileSystemTemplateStore", "PlaceholderRenderer"]
