"""Placeholder renderer for ``{{key}}`` templates."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..ports.template import ITemplateRenderer

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def to_text(value: Any) -> str:
    """Canonical text form of a payload value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PlaceholderRenderer(ITemplateRenderer):
    """
    Substitutes ``{{identifier}}`` tokens from a flat mapping.

    Single left-to-right pass, no escaping or nesting. A key that is absent
    from the data leaves its placeholder verbatim; a key present with a
    ``None`` value renders as an empty string.
    """

    def render(self, template: str, data: Mapping[str, Any]) -> str:
        if not template:
            logger.debug("Empty template provided for rendering")
            return ""

        def _substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in data:
                return to_text(data[key])
            logger.debug(f"Placeholder {key} not found in template data")
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(_substitute, template)
